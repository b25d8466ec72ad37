"""Centralized path configuration for the fuel-poverty project."""

import os
from pathlib import Path

# Project root (source code repository)
PROJECT_DIR = Path(__file__).resolve().parent.parent.parent

# Raw downloads and processed outputs; override for external storage
DATA_DIR = Path(os.environ.get("FUEL_POVERTY_DATA_DIR", PROJECT_DIR / "data"))

# Temporary processing outputs
TEMP_DIR = DATA_DIR / "temp"

# Raw inputs (spreadsheet and boundary shapefile)
RAW_DIR = DATA_DIR / "raw"

# Figures for the write-up
FIGURE_DIR = PROJECT_DIR / "stats" / "figures"
