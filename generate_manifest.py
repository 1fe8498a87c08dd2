#!/usr/bin/env python3
"""
Generate the deployment manifest (URIs, secrets, etcd certificates).
Usage: python generate_manifest.py --dns-base example.com --env myenv > manifest.yml
"""

import sys

from cfmanifest.cli import main

if __name__ == "__main__":
    sys.exit(main())
