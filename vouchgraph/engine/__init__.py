"""
vouchgraph.engine - Operation-level collaborators of the vouch network.

Modules:
    bootstrap  - BootstrapController: one-way seeding state machine.
    notifier   - ChangeNotifier, event dataclasses, EventRecorder.
"""
