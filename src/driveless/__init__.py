"""DriveLess admin authorization and route history services."""

__version__ = "0.1.0"
