#!/usr/bin/env python3
"""
Tests for file utility functions.
"""
import unittest
import os
import sys
import tempfile
from pathlib import Path

import numpy as np

sys.path.insert(0, os.path.abspath(os.path.dirname(os.path.dirname(__file__))))

from utils.file_utils import ensure_dir_exists, to_serializable, save_json, load_json


class TestFileUtils(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.root = Path(self.tmpdir.name)

    def tearDown(self):
        self.tmpdir.cleanup()

    def test_ensure_dir_exists(self):
        target = self.root / "a" / "b"
        ensure_dir_exists(target)
        ensure_dir_exists(target)
        self.assertTrue(target.is_dir())

    def test_to_serializable(self):
        converted = to_serializable({
            "n": np.int64(3),
            "x": np.float32(0.5),
            "betas": (0.3, -0.3),
            "draws": np.array([1.0, 2.0]),
            1: None,
            "path": Path("results"),
        })
        self.assertEqual(converted, {
            "n": 3, "x": 0.5, "betas": [0.3, -0.3], "draws": [1.0, 2.0], "1": None, "path": "results",
        })
        self.assertIsInstance(converted["n"], int)

    def test_save_and_load(self):
        path = self.root / "nested" / "truth.json"
        save_json({"true_params": {"a": np.float64(0.1)}, "n_obs": np.int32(100)}, path)
        self.assertEqual(load_json(path), {"true_params": {"a": 0.1}, "n_obs": 100})

    def test_load_missing_file(self):
        self.assertEqual(load_json(self.root / "absent.json"), {})


if __name__ == "__main__":
    unittest.main()
