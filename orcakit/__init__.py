#!/usr/bin/env python3
# encoding: utf-8

import orcakit.exceptions
import orcakit.common
import orcakit.parser
import orcakit.settings
import orcakit.job
from orcakit.common import VERSION
from orcakit.thermo import ThermoReport, extract_thermo

__version__ = VERSION
