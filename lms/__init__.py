"""Library Management System - patron roster package

This package contains:
- Patron model and field validation (patron.py, validators.py)
- In-memory patron store (patron_manager.py)
- Delimited text file synchronization (datafile.py)
- CLI interface and interactive menu (main.py)
- Settings and user preferences (config.py, cli_config.py)
"""
