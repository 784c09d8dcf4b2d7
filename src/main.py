#!/usr/bin/env python3
"""Main application entry point for pgmfilter."""

import os
import sys
import logging
import argparse

# Import project modules
from config.settings import SETTINGS
from codec import FormatError
from processing import ProcessingPipeline
from processing.kernels import BACKENDS

logger = logging.getLogger(__name__)


def setup_logging() -> None:
    """Configure root logging from the system settings."""
    system_settings = SETTINGS["system"]
    logging.basicConfig(
        level=getattr(logging, system_settings.LOG_LEVEL.upper(), logging.INFO),
        format=system_settings.LOG_FORMAT
    )


def setup_global_options(args: argparse.Namespace) -> None:
    """Setup global options like debug and verbose mode."""
    if args.debug or SETTINGS["system"].DEBUG_MODE:
        logging.getLogger().setLevel(logging.DEBUG)
        SETTINGS["system"].DEBUG_MODE = True
        print("Debug mode enabled")
    elif args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        print("Verbose mode enabled")


def prompt_for_input_file() -> str:
    """Ask the user for the input file name."""
    return input("Enter the name of the PGM file: ").strip()


def cmd_process(args: argparse.Namespace) -> None:
    """Run the median, average and edge filters over a PGM file."""
    input_file = args.input_file
    if not input_file:
        try:
            input_file = prompt_for_input_file()
        except EOFError:
            print("\nNo input file given.", file=sys.stderr)
            sys.exit(1)

    if not os.path.isfile(input_file):
        print("File does not exist.", file=sys.stderr)
        sys.exit(1)

    pipeline = ProcessingPipeline()
    if args.backend:
        for stage_name in pipeline.get_pipeline_info()["stages"]:
            pipeline.configure_stage(stage_name, backend=args.backend)

    try:
        written = pipeline.process_file(
            input_file,
            output_dir=args.output_dir,
            parallel=False if args.sequential else None,
            save_previews=args.save_previews or None
        )
    except (FormatError, OSError) as e:
        logger.debug("Processing failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    for stage_name, filepath in written.items():
        print(f"  {stage_name}: {filepath}")

    if args.display_stages:
        from utils.display import display_processing_stages
        display_processing_stages(pipeline.get_all_stage_results())

    print("Done.")


def cmd_generate_test_images(args: argparse.Namespace) -> None:
    """Write the synthetic test images."""
    from utils.testing import TestImageLoader

    loader = TestImageLoader(args.output_dir)
    written = loader.generate_test_images(overwrite=args.overwrite)
    print(f"Generated {len(written)} test images in {loader.test_dir}")


def cmd_test_pipeline(args: argparse.Namespace) -> None:
    """Test the filter pipeline with the synthetic test images."""
    from utils.testing import TestImageLoader, validate_pipeline

    print("Testing filter pipeline...")
    test_loader = TestImageLoader()

    if args.generate_images:
        test_loader.generate_test_images()

    test_image_names = test_loader.list_test_images()
    if not test_image_names:
        print("No test images found. Use --generate-images to create them.", file=sys.stderr)
        sys.exit(1)

    print(f"Found {len(test_image_names)} test images")
    test_images = [test_loader.load_image(name) for name in test_image_names]

    pipeline = ProcessingPipeline()
    results = validate_pipeline(pipeline, test_images)

    print("\nValidation Results:")
    failed = False
    for name, result in zip(test_image_names, results.values()):
        total_time = sum(result['processing_times'].values())
        status = "PASS" if result['passed'] else "FAIL"
        failed = failed or not result['passed']
        print(f"  [{status}] {name}: {total_time:.3f}s total")

    if failed:
        sys.exit(1)


def cmd_info(args: argparse.Namespace) -> None:
    """Display configuration."""
    print("pgmfilter Configuration")
    print("=" * 30)

    processing_settings = SETTINGS["processing"]
    print("\nProcessing Configuration:")
    print(f"  Filter Backend: {processing_settings.FILTER_BACKEND}")
    print(f"  Parallel Filters: {processing_settings.PARALLEL_FILTERS}")
    print(f"  Max Workers: {processing_settings.MAX_WORKERS}")

    system_settings = SETTINGS["system"]
    print("\nOutput Configuration:")
    print(f"  Output Directory: {system_settings.OUTPUT_DIR}")
    for stage_name, filename in system_settings.OUTPUT_FILENAMES.items():
        print(f"  {stage_name.title()} Output: {filename}")
    print(f"  Save Previews: {system_settings.SAVE_INTERMEDIATE_IMAGES}")

    if SETTINGS["env"]:
        print("\nEnvironment Overrides:")
        for key, value in SETTINGS["env"].items():
            print(f"  {key}: {value}")


def create_parser() -> argparse.ArgumentParser:
    """Create and configure argument parser."""
    parser = argparse.ArgumentParser(
        description='pgmfilter - median, average and Sobel edge filters for binary PGM images'
    )

    # Global options
    parser.add_argument('--debug', action='store_true', help='Enable debug mode')
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable verbose output')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # Process command
    process_parser = subparsers.add_parser('process', help='Filter a P5 PGM file')
    process_parser.add_argument('input_file', nargs='?',
                                help='Input PGM file path (prompted for if omitted)')
    process_parser.add_argument('--output-dir', '-o',
                                help='Directory for median.pgm, average.pgm and edge.pgm')
    process_parser.add_argument('--backend', choices=BACKENDS,
                                help='Filter kernel implementation')
    process_parser.add_argument('--sequential', action='store_true',
                                help='Run the filters one after another')
    process_parser.add_argument('--save-previews', action='store_true',
                                help='Also save PNG previews of each result')
    process_parser.add_argument('--display-stages', action='store_true',
                                help='Display the filter results')
    process_parser.set_defaults(func=cmd_process)

    # Generate-test-images command
    generate_parser = subparsers.add_parser('generate-test-images', help='Write synthetic PGM test images')
    generate_parser.add_argument('--output-dir', '-o', help='Directory for the test images')
    generate_parser.add_argument('--overwrite', action='store_true',
                                 help='Replace existing test images')
    generate_parser.set_defaults(func=cmd_generate_test_images)

    # Test-pipeline command
    test_pipeline_parser = subparsers.add_parser('test-pipeline', help='Validate the filter pipeline with test images')
    test_pipeline_parser.add_argument('--generate-images', action='store_true',
                                      help='Generate test images if needed')
    test_pipeline_parser.set_defaults(func=cmd_test_pipeline)

    # Info command
    info_parser = subparsers.add_parser('info', help='Display configuration')
    info_parser.set_defaults(func=cmd_info)

    return parser


def main(argv=None) -> None:
    """Main application entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return

    setup_logging()
    setup_global_options(args)

    args.func(args)


if __name__ == '__main__':
    main()
