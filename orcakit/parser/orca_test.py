#!/usr/bin/env python3
# encoding: utf-8

"""
This module contains unit tests of the orcakit.parser.orca module
"""

import os
import shutil
import unittest

import orcakit.parser.orca as orca
from orcakit.common import ORCAKIT_PATH
from orcakit.parser.orca import LogStatus, ScalarField
from orcakit.parser.parser import _get_lines_from_file


ORCA_TESTING_PATH = os.path.join(ORCAKIT_PATH, 'orcakit', 'testing', 'orca')


class TestOrcaParser(unittest.TestCase):
    """
    Contains unit tests for the ORCA output parser.
    """
    @classmethod
    def setUpClass(cls):
        """
        A method that is run before all unit tests in this class.
        """
        cls.maxDiff = None
        cls.tmp_dir = os.path.join(ORCAKIT_PATH, 'orcakit', 'testing', 'tmp_orca_parser')
        os.makedirs(cls.tmp_dir, exist_ok=True)
        cls.three_blocks = _get_lines_from_file(os.path.join(ORCA_TESTING_PATH, 'water_three_freq_blocks.out'))

    def test_check_log_status(self):
        """Test validating ORCA output files"""
        self.assertEqual(orca.check_log_status(os.path.join(ORCA_TESTING_PATH, 'water_three_freq_blocks.out')),
                         LogStatus.ok)
        self.assertEqual(orca.check_log_status(os.path.join(ORCA_TESTING_PATH, 'no_thermo.out')), LogStatus.ok)
        self.assertEqual(orca.check_log_status(os.path.join(ORCA_TESTING_PATH, 'not_orca.out')),
                         LogStatus.not_recognized)
        self.assertEqual(orca.check_log_status(os.path.join(ORCA_TESTING_PATH, 'abnormal_termination.out')),
                         LogStatus.abnormal_termination)
        self.assertEqual(orca.check_log_status(os.path.join(ORCA_TESTING_PATH, 'run_error.out')),
                         LogStatus.run_error)
        self.assertEqual(orca.check_log_status(os.path.join(ORCA_TESTING_PATH, 'nonexisting.out')),
                         LogStatus.not_found)

    def test_check_log_status_empty_file(self):
        """Test that an empty file is reported as not found"""
        path = os.path.join(self.tmp_dir, 'empty.out')
        with open(path, 'w'):
            pass
        self.assertEqual(orca.check_log_status(path), LogStatus.not_found)

    def test_check_log_status_order(self):
        """Test that the first failing check determines the status"""
        path = os.path.join(self.tmp_dir, 'status.out')
        lines = ['some text', 'ERROR: nothing works', 'ORCA TERMINATED NORMALLY']
        with open(path, 'w') as f:
            f.write('\n'.join(lines))
        # No signature wins over everything else
        self.assertEqual(orca.check_log_status(path, lines=lines), LogStatus.not_recognized)

        lines = ['* O   R   C   A *', 'ERROR: nothing works', 'ORCA TERMINATED NORMALLY']
        self.assertEqual(orca.check_log_status(path, lines=lines), LogStatus.run_error)

        lines = ['* O   R   C   A *', 'the SCF is aborting the run']
        self.assertEqual(orca.check_log_status(path, lines=lines), LogStatus.abnormal_termination)

        lines = ['* O   R   C   A *', 'the SCF is aborting the run', '****ORCA TERMINATED NORMALLY****']
        self.assertEqual(orca.check_log_status(path, lines=lines), LogStatus.run_error)

        # The error marker is case-sensitive
        lines = ['* O   R   C   A *', 'Error estimate 1e-5', '****ORCA TERMINATED NORMALLY****']
        self.assertEqual(orca.check_log_status(path, lines=lines), LogStatus.ok)

    def test_check_log_status_aborted(self):
        """Test a run which was aborted before terminating"""
        self.assertEqual(orca.check_log_status(os.path.join(ORCA_TESTING_PATH, 'aborted.out')),
                         LogStatus.abnormal_termination)

    def test_get_last_frequency_block(self):
        """Test getting the last vibrational frequencies block"""
        block = orca.get_last_frequency_block(self.three_blocks)
        mode_lines = [line for line in block if 'cm**-1' in line]
        self.assertEqual(len(mode_lines), 9)
        self.assertIn('     6:      1627.45 cm**-1', block)
        self.assertFalse(any('imaginary' in line for line in block))
        self.assertEqual(block[0], '-----------------------')
        self.assertNotIn('NORMAL MODES', block)

        self.assertIsNone(orca.get_last_frequency_block(['no', 'frequencies', 'here']))
        self.assertIsNone(orca.get_last_frequency_block(list()))

    def test_get_last_frequency_block_unterminated(self):
        """Test that a trailing block without a closing header is discarded"""
        lines = _get_lines_from_file(os.path.join(ORCA_TESTING_PATH, 'unterminated_block.out'))
        block = orca.get_last_frequency_block(lines)
        self.assertIn('     7:       -12.50 cm**-1 ***imaginary mode***', block)
        self.assertNotIn('     6:      -212.45 cm**-1 ***imaginary mode***', block)

        lines = ['VIBRATIONAL FREQUENCIES', '   1:     -45.32 cm**-1 ***imaginary mode***']
        self.assertIsNone(orca.get_last_frequency_block(lines))

    def test_get_last_frequency_block_edge_cases(self):
        """Test stray and empty block markers"""
        # A closing header without an opening one is ignored
        lines = ['NORMAL MODES', 'VIBRATIONAL FREQUENCIES', '   2:       8.10 cm**-1', 'NORMAL MODES', 'NORMAL MODES']
        self.assertEqual(orca.get_last_frequency_block(lines), ['   2:       8.10 cm**-1'])
        # An empty block counts as no block
        self.assertIsNone(orca.get_last_frequency_block(['VIBRATIONAL FREQUENCIES', 'NORMAL MODES']))
        # The last closed block wins even if it is empty
        lines = ['VIBRATIONAL FREQUENCIES', '   2:       8.10 cm**-1', 'NORMAL MODES',
                 'VIBRATIONAL FREQUENCIES', 'NORMAL MODES']
        self.assertIsNone(orca.get_last_frequency_block(lines))

    def test_classify_modes(self):
        """Test finding imaginary and very low modes"""
        block = ['   0:         0.00 cm**-1',
                 '   1:     -45.32 cm**-1 ***imaginary mode***',
                 '   2:       8.10 cm**-1',
                 ]
        imaginary, small = orca.classify_modes(block)
        self.assertEqual(imaginary, [(1, -45.32)])
        self.assertEqual(small, [(2, 8.10)])

        block = ['     6:       -31.07 cm**-1 ***imaginary mode***',
                 '     7:       -12.50 cm**-1 ***imaginary mode***',
                 '     8:         5.55 cm**-1',
                 '     9:        15.00 cm**-1',
                 '    10:        15.01 cm**-1',
                 '    11:      1630.84 cm**-1',
                 ]
        imaginary, small = orca.classify_modes(block)
        self.assertEqual(imaginary, [(6, -31.07), (7, -12.50)])
        self.assertEqual(small, [(8, 5.55), (9, 15.0)])

        imaginary, small = orca.classify_modes(['Scaling factor for frequencies =  1.000000000  (already applied!)'])
        self.assertEqual(imaginary, list())
        self.assertEqual(small, list())

    def test_classify_modes_from_last_block(self):
        """Test that only the last of several frequency blocks is classified"""
        lines = _get_lines_from_file(os.path.join(ORCA_TESTING_PATH, 'unterminated_block.out'))
        imaginary, small = orca.classify_modes(orca.get_last_frequency_block(lines))
        self.assertEqual(imaginary, [(6, -31.07), (7, -12.5)])
        self.assertEqual(small, [(8, 5.55), (9, 15.0)])

        imaginary, small = orca.classify_modes(orca.get_last_frequency_block(self.three_blocks))
        self.assertEqual(imaginary, list())
        self.assertEqual(small, list())

    def test_parse_scalar_field(self):
        """Test parsing energies, the last occurrence wins"""
        self.assertAlmostEqual(orca.parse_scalar_field(self.three_blocks, ScalarField.single_point_energy),
                               -76.326160553102, places=12)
        self.assertAlmostEqual(orca.parse_scalar_field(self.three_blocks, ScalarField.gibbs_free_energy),
                               -76.37125002, places=8)
        self.assertAlmostEqual(orca.parse_scalar_field(self.three_blocks, ScalarField.g_minus_e_el),
                               0.02018941, places=8)
        self.assertAlmostEqual(orca.parse_scalar_field(self.three_blocks, 'g_minus_e_el'), 0.02018941, places=8)
        self.assertIsNone(orca.parse_scalar_field(['nothing to see'], ScalarField.single_point_energy))

    def test_parse_scalar_field_signs(self):
        """Test parsing signed energies"""
        lines = ['G-E(el)                           ...      -0.00912345 Eh     -5.73 kcal/mol']
        self.assertAlmostEqual(orca.parse_scalar_field(lines, ScalarField.g_minus_e_el), -0.00912345, places=8)
        lines = ['Final Gibbs free energy         ...    +12.50000000 Eh']
        self.assertAlmostEqual(orca.parse_scalar_field(lines, ScalarField.gibbs_free_energy), 12.5, places=8)
        lines = ['Final Gibbs free energy         ...    -76.38201321 Eh',
                 'Final Gibbs free energy         ...    -76.37645112 Eh']
        self.assertAlmostEqual(orca.parse_scalar_field(lines, ScalarField.gibbs_free_energy), -76.37645112, places=8)
        # A value which is not followed by the unit is not a Gibbs free energy
        lines = ['Final Gibbs free energy         ...    -76.38201321 kcal/mol']
        self.assertIsNone(orca.parse_scalar_field(lines, ScalarField.gibbs_free_energy))

    def test_parse_scalar_fields(self):
        """Test parsing all energies"""
        values = orca.parse_scalar_fields(self.three_blocks)
        self.assertEqual(list(values.keys()), [ScalarField.single_point_energy,
                                               ScalarField.gibbs_free_energy,
                                               ScalarField.g_minus_e_el])
        lines = _get_lines_from_file(os.path.join(ORCA_TESTING_PATH, 'single_point.out'))
        self.assertEqual(orca.parse_scalar_fields(lines), {ScalarField.single_point_energy: -76.300000000001})
        lines = _get_lines_from_file(os.path.join(ORCA_TESTING_PATH, 'no_thermo.out'))
        self.assertEqual(orca.parse_scalar_fields(lines), dict())

    @classmethod
    def tearDownClass(cls):
        """
        A function that is run ONCE after all unit tests in this class.
        Delete all project directories created during these unit tests.
        """
        shutil.rmtree(cls.tmp_dir, ignore_errors=True)


if __name__ == '__main__':
    unittest.main(testRunner=unittest.TextTestRunner(verbosity=2))
