"""
HireMe job-marketplace backend.

Jobs, applications, job connections and feedback, with the deferred
background work that completes their lifecycle.
"""
