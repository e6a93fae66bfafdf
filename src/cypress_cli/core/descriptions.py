"""Help text for every option the CLI declares.

The command schemas refer to these entries by key.  A schema that names
a key missing from :data:`DESCRIPTIONS` is rejected when the registry is
built, so a missing help string can never reach a user.
"""

from __future__ import annotations

from types import MappingProxyType

from cypress_cli.exceptions import ConfigurationError

DESCRIPTIONS = MappingProxyType({
    "browserOpenMode": "path to a custom browser to be added to the list of available browsers in Cypress",
    "browserRunMode": (
        "runs Cypress in the browser with the given name. if a filesystem path is "
        "supplied, Cypress will attempt to use the browser at that path."
    ),
    "cacheClear": "delete all cached binaries",
    "cacheList": "list cached binary versions",
    "cachePath": "print the path to the binary cache",
    "ciBuildId": (
        'the unique identifier for a run on your CI provider. typically a "BUILD_ID" '
        "env var. this value is automatically detected for most CI providers"
    ),
    "config": "sets configuration values. separate multiple values with a comma. overrides any value in cypress.json.",
    "configFile": 'path to JSON file where configuration values are set. defaults to "cypress.json". pass "false" to disable.',
    "detached": "runs Cypress application in detached mode",
    "dev": "runs cypress in development and bypasses binary check",
    "env": (
        "sets environment variables. separate multiple values with a comma. "
        "overrides any value in cypress.json or cypress.env.json"
    ),
    "exit": "keep the browser open after tests finish",
    "forceInstall": "force install the Cypress binary",
    "global": "force Cypress into global mode as if its globally installed",
    "group": "a named group for recorded runs in the Cypress Dashboard",
    "headed": "displays the browser instead of running headlessly (defaults to true for Chrome-family browsers)",
    "headless": "hide the browser instead of running headed (defaults to true for Electron)",
    "help": "output usage information",
    "key": "your secret Record Key. you can omit this if you set a CYPRESS_RECORD_KEY environment variable.",
    "parallel": "enables concurrent runs and automatic load balancing of specs across multiple machines or processes",
    "port": "runs Cypress on a specific port. overrides any value in cypress.json.",
    "project": "path to the project",
    "record": "records the run. sends test results, screenshots and videos to your Cypress Dashboard.",
    "reporter": 'runs a specific mocha reporter. pass a path to use a custom reporter. defaults to "spec"',
    "reporterOptions": 'options for the mocha reporter. defaults to "null"',
    "spec": 'runs specific spec file(s). defaults to "all"',
    "tag": "named tag(s) for recorded runs in the Cypress Dashboard",
    "version": "prints Cypress version",
})


def text(key: str) -> str:
    """Return the help text registered under *key*.

    Raises
    ------
    ConfigurationError
        If no description exists for *key*.
    """
    try:
        return DESCRIPTIONS[key]
    except KeyError:
        raise ConfigurationError(f"Could not find description for: {key}") from None
