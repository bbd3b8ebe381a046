"""Functional modules for sequential renaming of image attachments.

Submodules
----------
vault
    Local vault access: files, folders, notes and link resolution.
links
    Extraction and rewriting of wiki and markdown references.
index
    Next free index for a filename prefix.
collect
    Candidate discovery by note, folder or vault root.
ordering
    Deterministic processing order.
rename
    Name assignment, move execution and the run orchestrator.
rewriter
    Textual reference rewriting for moved files.
settings_store
    JSON persistence of user settings.
dialog
    Tkinter dialog for one-off runs.
"""
