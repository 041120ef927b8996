"""ragdesk - client for a Retrieval-Augmented Generation backend.

Manages a document corpus and streams answers from the assistant, keeping
the client's view consistent with what the backend reports.

Components:
    - client: HTTP transport adapter and configuration
    - chat: streaming response reconciler owning the transcript
    - documents: staged, stored and ingested document lifecycle
    - pipeline: read-only mirror of backend pipeline status
    - session: session scope and admin access gate
    - models: payload schemas and client-side state
    - ui: NiceGUI pages
"""

__version__ = "0.1.0"
