"""
Shared fixtures for pyahps tests.
"""

from pathlib import Path

import pytest

from ahps.parser import parse

DATA_DIR = Path(__file__).parent / "data"


@pytest.fixture(autouse=True)
def clean_ahps_env(monkeypatch):
    """Keep AHPS_* settings from the calling shell out of the tests."""
    for name in ("AHPS_BASE_URL", "AHPS_TIMEOUT", "AHPS_SORT_SERIES"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def btrl1_xml():
    """Raw report for the Mississippi River at Baton Rouge."""
    return (DATA_DIR / "btrl1.xml").read_bytes()


@pytest.fixture
def btrl1_site(btrl1_xml):
    """Parsed report for the Mississippi River at Baton Rouge."""
    return parse(btrl1_xml)


def make_document(observed="", forecast="", sigstages="", extra=""):
    """Build a minimal site document around the given section bodies."""
    parts = ['<?xml version="1.0" encoding="UTF-8"?>']
    parts.append('<site name="Test River" id="TEST1" timezone="UTC" '
                 'originator="Test RFC" generationtime="2021-12-14T16:00:00-00:00">')
    if sigstages:
        parts.append(f"<sigstages>{sigstages}</sigstages>")
    parts.append(extra)
    if observed is not None:
        parts.append(f"<observed>{observed}</observed>")
    if forecast is not None:
        parts.append(f'<forecast timezone="CST" issued="2021-12-14T09:00:00-00:00">{forecast}</forecast>')
    parts.append("</site>")
    return "".join(parts).encode("utf-8")


def make_datum(valid, primary, units="ft", secondary=None):
    """Build a single observed/forecast datum element."""
    body = f"<valid>{valid}</valid><primary name=\"Stage\" units=\"{units}\">{primary}</primary>"
    if secondary is not None:
        body += f"<secondary name=\"Flow\" units=\"kcfs\">{secondary}</secondary>"
    body += "<pedts>HGIRG</pedts>"
    return f"<datum>{body}</datum>"
