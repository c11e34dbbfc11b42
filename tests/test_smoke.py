def test_buildplan_imports():
    """Verify all buildplan submodules can be imported without errors."""
    import buildplan
    import buildplan.cli
    import buildplan.config
    import buildplan.detector
    import buildplan.pipeline
    import buildplan.resolver
    import buildplan.script

    assert buildplan is not None
