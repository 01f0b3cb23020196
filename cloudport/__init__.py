"""
Provider VPC ports for a multi-cloud management layer.

This package provides:
- Port / FixedIP models decoded from the ports API
- Canonical status and association-type normalization
- A region client with marker pagination over ports
- A thin requests-based API client and a JSON snapshot of normalized ports
"""
