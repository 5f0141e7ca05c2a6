"""
Portal package.

The client-side workflow behind the application wizard: state machine,
progress simulation, input validation and the traffic log.
"""
