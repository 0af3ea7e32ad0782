#!/usr/bin/env python3
"""
influxroute Test Configuration - PyTest Configuration and Fixtures

Shared fixtures for the lexer, extractor, classifier and router tests.
"""

import pytest
import os
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config.router_config import ConfigManager

@pytest.fixture
def isolated_env(monkeypatch, tmp_path):
    """Private copy of os.environ without INFLUXROUTE_* settings"""
    environ = {key: value for key, value in os.environ.items()
               if not key.startswith('INFLUXROUTE_')}
    environ['INFLUXROUTE_HOME'] = str(tmp_path)
    monkeypatch.setattr(os, 'environ', environ)
    monkeypatch.setattr(ConfigManager, '_instance', None)
    monkeypatch.setattr(ConfigManager, '_config', None)
    return environ

@pytest.fixture
def sample_queries():
    """Sample InfluxQL statements for testing"""
    return {
        'quoted_triple': 'SELECT * FROM "mydb"."rp1"."cpu"',
        'bare_measurement': 'SELECT * FROM cpu',
        'default_rp': 'SELECT * FROM mydb..cpu',
        'subquery': 'SELECT * FROM (SELECT * FROM "mydb"."rp1"."cpu")',
        'select_into': 'SELECT * INTO other FROM cpu',
        'show_databases': 'SHOW DATABASES',
        'delete_from': 'DELETE FROM cpu',
        'unmatched_quote': 'SELECT * FROM "cpu',
    }

# Custom markers for test organization
def pytest_configure(config):
    """Configure custom pytest markers"""
    config.addinivalue_line(
        "markers", "unit: Unit tests that test individual components"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests that test component interaction"
    )
