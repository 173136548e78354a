"""Urban Heat Island Analyzer workflow core.

Walks a user from a free-text city query to a confirmed circular analysis
boundary and a simulated multi-step analysis run, then hands off to the
results view.
"""

__version__ = "0.1.0"
