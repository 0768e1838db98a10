"""
Test suite for the fml_interpreter project.

This module contains all unit tests for the fml_interpreter package.
"""
