pytest_plugins = ["scopefs.pytest_plugin"]
