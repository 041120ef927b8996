"""NiceGUI interface - thin presentation layer over the session engine.

Responsibilities:
    - Role choice and the admin passcode gate
    - Streaming chat transcript with tone selection
    - Drag and drop staging, stored document list, ingestion trigger
    - Pipeline configuration panel

Contains no state of its own. Every page renders a projection of the
reconciler or the lifecycle manager and calls their operations.
"""
