"""
Control core: SampleCycle, TelemetryPublisher, NodeSupervisor.

Pure state transitions live next to the classes that perform the blocking
I/O, so the transitions can be unit-tested without a bus or a scheduler.
"""
