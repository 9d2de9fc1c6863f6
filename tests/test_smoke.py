def test_package_imports():
    """Verify all bundler submodules can be imported without errors."""
    import ptbundler
    import ptbundler.archive
    import ptbundler.core
    import ptbundler.paths
    import ptbundler.pipeline
    import ptbundler.staging
    import ptbundler.vcs

    assert ptbundler is not None
