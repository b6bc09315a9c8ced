"""
API module for IRB Screen.

Provides REST API routes for:
- Review-level classification
- Consistency and completeness checks
- Submission document selection
"""
