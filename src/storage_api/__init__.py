"""HTTP facade over an S3 bucket: upload, download, list and delete files by public URL."""
