#!/usr/bin/env python3
# encoding: utf-8

"""
This module contains unit tests of the orcakit.common module
"""

import io
import logging
import os
import shutil
import unittest
from unittest.mock import patch

import orcakit.common as common
from orcakit.common import ORCAKIT_PATH


class TestCommon(unittest.TestCase):
    """
    Contains unit tests for orcakit.common
    """
    @classmethod
    def setUpClass(cls):
        """
        A method that is run before all unit tests in this class.
        """
        cls.maxDiff = None
        cls.tmp_dir = os.path.join(ORCAKIT_PATH, 'orcakit', 'testing', 'tmp_common')
        os.makedirs(cls.tmp_dir, exist_ok=True)

    def test_orcakit_path(self):
        """Test that ORCAKIT_PATH points to the repository root"""
        self.assertTrue(os.path.isdir(os.path.join(ORCAKIT_PATH, 'orcakit')))
        self.assertTrue(os.path.isfile(os.path.join(ORCAKIT_PATH, 'orcakit', 'common.py')))

    def test_get_logger(self):
        """Test that the same logger is always returned"""
        self.assertIs(common.get_logger(), common.get_logger())
        self.assertEqual(common.get_logger().name, 'orcakit')

    def test_initialize_log(self):
        """Test that messages are routed to stdout or stderr by their level"""
        logger = common.get_logger()
        with patch('sys.stdout', new_callable=io.StringIO) as mock_stdout, \
                patch('sys.stderr', new_callable=io.StringIO) as mock_stderr:
            common.initialize_log()
            logger.debug('debug message')
            logger.info('info message')
            logger.warning('warning message')
            logger.error('error message')
        self.assertEqual(mock_stdout.getvalue(), '  info message\n')
        self.assertEqual(mock_stderr.getvalue(), '  Warning: warning message\n  Error: error message\n')

    def test_initialize_log_twice(self):
        """Test that initializing the log again replaces the handlers"""
        common.initialize_log()
        common.initialize_log()
        self.assertEqual(len(common.get_logger().handlers), 2)

    def test_initialize_log_file(self):
        """Test additionally logging into a file"""
        log_file = os.path.join(self.tmp_dir, 'orcakit.log')
        logger = common.get_logger()
        with patch('sys.stdout', new_callable=io.StringIO), patch('sys.stderr', new_callable=io.StringIO):
            common.initialize_log(verbose=logging.DEBUG, log_file=log_file)
            logger.debug('debug message')
            logger.error('error message')
        for handler in logger.handlers:
            handler.close()
        with open(log_file, 'r') as f:
            self.assertEqual(f.read(), '  debug message\n  Error: error message\n')
        common.initialize_log()

    @classmethod
    def tearDownClass(cls):
        """
        A function that is run ONCE after all unit tests in this class.
        Delete all project directories created during these unit tests.
        """
        shutil.rmtree(cls.tmp_dir, ignore_errors=True)


if __name__ == '__main__':
    unittest.main(testRunner=unittest.TextTestRunner(verbosity=2))
