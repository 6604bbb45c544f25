# Review Request Action - Package
#
# This package contains the stages of the "request code review" GitHub
# Action used by the course project repositories. Each step is in its own
# file following the one-function-per-file pattern, and the stages are
# sequenced by review_request_main.py.
#
# The action runs on a GitHub Actions runner as three separate processes
# (setup, main, cleanup). Values needed by a later process are persisted
# through the runner's state file (see state_store.py).
#
# Step flow:
#   setup:   1. Parse Project -> 2. Verify Release -> 3. Check Issues
#            -> 4. Clone Project -> save state
#   main:    restore state -> 5. Check Build -> 6. Request Review
#   cleanup: restore state -> save Maven cache
