pytest_plugins = 'crumbjar.pytest_plugin'
