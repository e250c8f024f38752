"""gantry server runtime: entry point, static modules, API + dashboard."""
