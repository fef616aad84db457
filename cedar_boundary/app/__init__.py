"""
Cedar policy boundary application package.

Turns untrusted text into calls on an external policy engine and answers
with a uniform JSON envelope:

- app.main: the public operations and the ``PolicyBoundary`` facade.
- app.pipeline: stage gates, the code table and the fail-fast orchestrator.
- app.engine: the engine interface and its adapters.
- app.diagnostics / app.envelope: reshaping engine output into the wire form.
- app.cli: command-line entry point.

Design notes:
- Operations are synchronous and keep no state between calls.
- Input the engine refuses is never raised; it becomes a failure envelope.
- Use the shared/ utilities for logging, metrics, configuration and errors.
"""
