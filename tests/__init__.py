"""
Test suite for geoledger

Contains:
- tests/unit/          : Unit tests for individual modules
- tests/scenarios/     : End-to-end marketplace scenarios (land + building)
"""
