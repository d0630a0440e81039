#!/usr/bin/env python3
"""
Dumbbell Lifting Technique Analysis
===================================

Runs the analysis described by a YAML configuration and writes the report.

Usage:
    python scripts/run_analysis.py configs/default.yaml [--debug] [--retrain]
"""
import sys
from pathlib import Path

# Add parent directory to path
sys.path.append(str(Path(__file__).parent.parent))

from liftform.runner import main


if __name__ == "__main__":
    sys.exit(main())
