"""
API endpoint modules for JobPrep
"""

from jobprep.api.endpoints import interview, outreach, metadata

__all__ = ["interview", "outreach", "metadata"]
