"""Smoke tests to verify package imports work."""

def test_package_imports():
    """Test that all main classes can be imported."""
    from xenos import OrbitalElementSet, HeliocentricState, Trajectory, BatchResult
    assert OrbitalElementSet is not None
    assert HeliocentricState is not None
    assert Trajectory is not None
    assert BatchResult is not None

def test_version_exists():
    """Test that version is defined."""
    import xenos
    assert hasattr(xenos, '__version__')
    assert xenos.__version__ == "0.1.0"

def test_can_create_element_set():
    """Test basic OrbitalElementSet creation."""
    from xenos import OrbitalElementSet
    oe = OrbitalElementSet(e=2.0, q=1.0, i=10.0, omega=0.0, node=0.0, tp='2025-01-01')
    assert oe.e == 2.0

def test_default_catalog():
    """Test the bundled catalog loads."""
    from xenos import DEFAULT_CATALOG
    assert '3I/ATLAS' in DEFAULT_CATALOG
    assert len(DEFAULT_CATALOG) == 3

def test_star_import_names_exist():
    """Every name in __all__ resolves."""
    import xenos
    for name in xenos.__all__:
        assert hasattr(xenos, name), name
