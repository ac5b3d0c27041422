"""appjson command line interface."""
