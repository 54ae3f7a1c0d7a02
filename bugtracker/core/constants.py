"""
Constants
Centralised storage for bucket/table names and fixed response strings.
"""
# Storage buckets
FILE_BUCKET = "bug"
FOLDER_BUCKET = "bugfolders"
ANALYSIS_BUCKET = "bug"
WEBHOOK_BUCKET = "bug"

# Storage path prefixes
FILE_PREFIX = "files/"
FOLDER_PREFIX = "folders/"
ANALYSIS_PREFIX = "bug/"

# Findings tables
FINDINGS_TABLE = "bug"
LINT_FINDINGS_TABLE = "bugs"

# Classifier fallbacks
CLASSIFIER_FAILURE = "Failed to analyze code"
NO_ISSUES_LABEL = "No issues detected"

# Response messages
MSG_NO_FILE = "No file uploaded"
MSG_NO_FOLDER = "No folder uploaded"
MSG_FILE_UPLOADED = "File uploaded successfully!"
MSG_FOLDER_UPLOADED = "Folder uploaded successfully!"
MSG_ANALYSIS_DONE = "File uploaded successfully"
MSG_MISSING_PATH = "Missing file path in request."
MSG_METHOD_NOT_ALLOWED = "Method Not Allowed"
MSG_NO_BUGS = "No bugs detected."
MSG_BUGS_STORED = "Bug tracking data stored successfully."
