#!/usr/bin/env python
"""
Development server runner

Usage:
    python run.py
"""

from userqr import create_app

if __name__ == '__main__':
    app = create_app()

    # Print registered routes for debugging
    print("\n=== Registered Routes ===")
    for rule in app.url_map.iter_rules():
        print(f"{rule.rule:40s} -> {rule.endpoint}")
    print("=" * 70)

    app.run(host='0.0.0.0', port=5001, debug=True)
