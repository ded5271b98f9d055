"""Core pipeline: transport, auth probing, discovery, extraction, transcripts.

Subpackages are imported directly (e.g. ``from meetstream_bridge.core.auth
import resolve_auth_scheme``); this module re-exports nothing so the catalog
schema can import the leaf type modules without loading the pipeline.
"""
