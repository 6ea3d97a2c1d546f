#!/usr/bin/env python3
# encoding: utf-8

"""
This module contains unit tests of the orcakit.job.local module
"""

import os
import shutil
import unittest
from unittest.mock import patch

import orcakit.job.local as local
from orcakit.common import ORCAKIT_PATH
from orcakit.exceptions import SettingsError


class TestLocal(unittest.TestCase):
    """
    Contains unit tests for the local module
    """
    @classmethod
    def setUpClass(cls):
        """
        A method that is run before all unit tests in this class.
        """
        cls.maxDiff = None
        cls.tmp_dir = os.path.join(ORCAKIT_PATH, 'orcakit', 'testing', 'tmp_local')
        os.makedirs(cls.tmp_dir, exist_ok=True)

    def test_execute_command(self):
        """Test executing a local command"""
        stdout, stderr = local.execute_command('echo hello')
        self.assertEqual(stdout, ['hello'])
        self.assertEqual(stderr, [])

        stdout, stderr = local.execute_command(['echo first', 'echo second'])
        self.assertEqual(stdout, ['first', 'second'])

        stdout, _ = local.execute_command('pwd', cwd=self.tmp_dir)
        self.assertEqual(os.path.realpath(stdout[0]), os.path.realpath(self.tmp_dir))

        stdout, _ = local.execute_command('echo no shell', shell=False)
        self.assertEqual(stdout, ['no shell'])

    def test_execute_command_failure(self):
        """Test executing a failing command"""
        with self.assertRaises(SettingsError):
            local.execute_command('echo oops >&2; exit 3')
        self.assertEqual(local.execute_command('exit 3', no_fail=True), (None, None))

    def test_check_command_available(self):
        """Test checking whether an executable is on the PATH"""
        self.assertTrue(local.check_command_available('sh'))
        self.assertFalse(local.check_command_available('surely_not_an_installed_program'))

    def test_is_module_available(self):
        """Test checking for an environment module version"""
        module_avail = ['', '----------------- /opt/bwhpc/common/modulefiles/Core -----------------',
                        '   chem/orca/5.0.4    chem/orca/6.0.0 (D)    chem/orca/16.0.01', '']
        with patch('orcakit.job.local.execute_command', return_value=(module_avail, [])) as mock_execute:
            self.assertTrue(local.is_module_available('chem/orca', '6.0.0'))
            self.assertTrue(local.is_module_available('chem/orca', '5.0.4'))
            self.assertFalse(local.is_module_available('chem/orca', '6.0.1'))
            self.assertFalse(local.is_module_available('chem/orca', '6.0.0.1'))
            command = mock_execute.call_args[0][0]
            self.assertTrue(command.startswith('bash -lc '))
            self.assertIn('module avail chem/orca 2>&1', command)
        with patch('orcakit.job.local.execute_command', return_value=(None, None)):
            self.assertFalse(local.is_module_available('chem/orca', '6.0.0'))

    def test_submit_job(self):
        """Test submitting a job"""
        with patch('orcakit.job.local.execute_command',
                   return_value=(['Submitted batch job 17670585'], [])) as mock_execute:
            job_status, job_id = local.submit_job(path=self.tmp_dir, submit_filename='water.sh')
            self.assertEqual(job_status, 'running')
            self.assertEqual(job_id, '17670585')
            mock_execute.assert_called_once_with('sbatch water.sh', cwd=self.tmp_dir)
        with patch('orcakit.job.local.execute_command',
                   return_value=([], ['sbatch: error: Batch job submission failed: Invalid account'])):
            job_status, job_id = local.submit_job(path=self.tmp_dir, submit_filename='water.sh')
            self.assertEqual(job_status, 'errored')
            self.assertEqual(job_id, '')

    def test_determine_job_id(self):
        """Test determining a job ID from the stdout of a job submission command."""
        stdout = ['Submitted batch job 17670585']
        self.assertEqual(local._determine_job_id(stdout, cluster_soft_='slurm'), '17670585')
        self.assertEqual(local._determine_job_id(stdout), '17670585')
        self.assertEqual(local._determine_job_id(['sbatch: warning: something']), '')
        with self.assertRaises(ValueError):
            local._determine_job_id(stdout, cluster_soft_='wrong')

    def test_write_file_and_change_mode(self):
        """Test writing a file and making it executable"""
        path = os.path.join(self.tmp_dir, 'script.sh')
        local.write_file(path, '#!/bin/bash\necho test\n')
        with open(path, 'r') as f:
            self.assertEqual(f.read(), '#!/bin/bash\necho test\n')
        os.chmod(path, 0o644)
        self.assertFalse(os.access(path, os.X_OK))
        local.change_mode(mode='+x', file_name='script.sh', path=self.tmp_dir)
        self.assertTrue(os.access(path, os.X_OK))

    @classmethod
    def tearDownClass(cls):
        """
        A function that is run ONCE after all unit tests in this class.
        Delete all project directories created during these unit tests.
        """
        shutil.rmtree(cls.tmp_dir, ignore_errors=True)


if __name__ == '__main__':
    unittest.main(testRunner=unittest.TextTestRunner(verbosity=2))
