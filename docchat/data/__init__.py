"""Template data handling."""

"""
docchat/data/
├── __init__.py
├── document_io.py         # package read/write, text node access
├── models.py              # Placeholder, Session
├── errors.py              # error types
├── placeholder_detector/  # token detectors
│   ├── __init__.py
│   ├── base_detector.py
│   └── token_detector.py
├── document_handler.py    # syntax normalization, detector precedence
├── document_filler.py     # token substitution
└── report_generator.py    # fill report
"""
