"""Tests for the pgmfilter command line interface."""

import io
import os
import tempfile
import unittest
from contextlib import redirect_stdout, redirect_stderr
from unittest import mock
import numpy as np

import matplotlib
matplotlib.use('Agg')

import sys
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

import main
from codec import PGMImage, read_pgm, write_pgm
from utils.display import display_processing_stages, show_image


class TestProcessCommand(unittest.TestCase):
    """Test the process subcommand end to end."""

    def setUp(self):
        self.tmp_dir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp_dir.cleanup)
        self.input_path = os.path.join(self.tmp_dir.name, "input.pgm")
        self.output_dir = os.path.join(self.tmp_dir.name, "out")
        pixels = np.arange(64, dtype=np.uint8).reshape(8, 8) * 3
        write_pgm(PGMImage.from_array(pixels), self.input_path)

    def run_main(self, argv):
        stdout, stderr = io.StringIO(), io.StringIO()
        with redirect_stdout(stdout), redirect_stderr(stderr):
            main.main(argv)
        return stdout.getvalue(), stderr.getvalue()

    def test_process_writes_three_files(self):
        """Test process command writes the median, average and edge files."""
        stdout, _ = self.run_main(["process", self.input_path, "-o", self.output_dir, "--sequential"])
        self.assertIn("Done.", stdout)
        self.assertEqual(sorted(os.listdir(self.output_dir)), ["average.pgm", "edge.pgm", "median.pgm"])
        self.assertEqual(read_pgm(os.path.join(self.output_dir, "edge.pgm")).size, (8, 8))

    def test_process_prompts_for_missing_argument(self):
        """Test process command prompts for the input file name."""
        with mock.patch('builtins.input', return_value=self.input_path):
            stdout, _ = self.run_main(["process", "-o", self.output_dir, "--backend", "opencv"])
        self.assertIn("Done.", stdout)

    def test_missing_file_exits_non_zero(self):
        """Test missing input file is reported and exits with status 1."""
        stderr = io.StringIO()
        with redirect_stderr(stderr), self.assertRaises(SystemExit) as ctx:
            main.main(["process", os.path.join(self.tmp_dir.name, "nope.pgm")])
        self.assertEqual(ctx.exception.code, 1)
        self.assertIn("File does not exist.", stderr.getvalue())

    def test_closed_stdin_exits_non_zero(self):
        """Test end of input at the file name prompt exits with status 1."""
        stderr = io.StringIO()
        with mock.patch('builtins.input', side_effect=EOFError), \
                redirect_stderr(stderr), self.assertRaises(SystemExit) as ctx:
            main.main(["process", "-o", self.output_dir])
        self.assertEqual(ctx.exception.code, 1)
        self.assertIn("No input file given.", stderr.getvalue())

    def test_oversized_header_exits_non_zero(self):
        """Test huge declared dimensions are reported as an error."""
        with open(self.input_path, 'wb') as f:
            f.write(b"P5\n3000000000 3000000000\n255\n" + bytes(4))

        stderr = io.StringIO()
        with redirect_stderr(stderr), self.assertRaises(SystemExit) as ctx:
            main.main(["process", self.input_path, "-o", self.output_dir])
        self.assertEqual(ctx.exception.code, 1)
        self.assertIn("short read", stderr.getvalue())

    def test_format_error_exits_non_zero(self):
        """Test unsupported depth is reported and exits with status 1."""
        with open(self.input_path, 'wb') as f:
            f.write(b"P5\n2 2\n65535\n" + bytes(8))

        stderr = io.StringIO()
        with redirect_stderr(stderr), self.assertRaises(SystemExit) as ctx:
            main.main(["process", self.input_path, "-o", self.output_dir])
        self.assertEqual(ctx.exception.code, 1)
        self.assertIn("unsupported depth", stderr.getvalue())

    def test_truncated_file_exits_non_zero(self):
        """Test short pixel body exits with status 1."""
        with open(self.input_path, 'wb') as f:
            f.write(b"P5\n8 8\n255\n" + bytes(10))

        with self.assertRaises(SystemExit) as ctx:
            self.run_main(["process", self.input_path, "-o", self.output_dir])
        self.assertEqual(ctx.exception.code, 1)

    def test_generate_and_validate(self):
        """Test generate-test-images command writes PGM files."""
        images_dir = os.path.join(self.tmp_dir.name, "images")
        stdout, _ = self.run_main(["generate-test-images", "-o", images_dir])
        self.assertIn("Generated 5 test images", stdout)
        self.assertTrue(all(name.endswith(".pgm") for name in os.listdir(images_dir)))

    def test_info(self):
        """Test info command prints the configuration."""
        stdout, _ = self.run_main(["info"])
        self.assertIn("Filter Backend", stdout)


class TestDisplay(unittest.TestCase):
    """Test the matplotlib display helpers without opening windows."""

    def test_save_stage_comparison(self):
        """Test stage comparison and single image figures are saved."""
        image = PGMImage.from_array(np.eye(6, dtype=np.uint8) * 255)
        with tempfile.TemporaryDirectory() as tmp_dir:
            grid_path = os.path.join(tmp_dir, "stages.png")
            display_processing_stages({"median": image, "edge": image}, save_path=grid_path, show=False)
            self.assertTrue(os.path.exists(grid_path))

            single_path = os.path.join(tmp_dir, "single.png")
            show_image(image, save_path=single_path, show=False)
            self.assertTrue(os.path.exists(single_path))


if __name__ == '__main__':
    unittest.main()
