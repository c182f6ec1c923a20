#!/usr/bin/env python3
"""
Signed URL Builder

Run this script to print plain or signed object-store and CDN URLs.

Usage:
    python run.py s3 my-bucket path/to/key.jpg
    python run.py s3 my-bucket key.jpg --expires-in 3600      # signed
    python run.py s3 my-bucket key.jpg --bucket-style path
    python run.py cloudfront d111.cloudfront.net key.jpg \\
        --key-pair-id APKA... --private-key cf.pem            # signed CDN URL
    python run.py -q -j result.json s3 my-bucket key.jpg      # quiet + JSON
"""

import sys
from urlbuilder.cli import main

if __name__ == "__main__":
    sys.exit(main())
