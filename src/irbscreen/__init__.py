"""
IRB Screen - Human-Subjects Research Pre-Screening

A rules-based advisor that:
- Maps a protocol description onto Exempt, Expedited or Full Board review (45 CFR 46)
- Explains each determination with regulatory citations, confidence and flags
- Emits advisory recommendations and cross-field consistency checks
- Selects the document set an IRB submission needs
"""

__version__ = "0.1.0"
