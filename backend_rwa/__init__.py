"""
Backend RWA: validation and risk scoring for tokenized real-world asset projects.

Runs scam, sanctions and audit checks on submitted projects, classifies risk,
records reviewer overrides, and persists the latest validation per project.
The directory UI, submission forms and email live elsewhere and talk to this
package through the API server or the functions in backend_rwa.analytics.
"""

__version__ = "0.1.0"
