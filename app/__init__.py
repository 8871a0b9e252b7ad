"""
Placement Eligibility Engine
Tiered eligibility checks and transactional job applications.

Architecture:
- Tier 1: primary criteria on the job (CGPA, backlogs, branch, targeting)
- Tier 2: secondary profile sections a job can make mandatory
- Tier 3: custom job-specific fields answered per application
- PostgreSQL: students, extended profiles, jobs, applications + snapshots
"""

__version__ = "1.0.0"
__author__ = "Student"
