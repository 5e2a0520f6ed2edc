"""Password-gated S3 uploader."""
