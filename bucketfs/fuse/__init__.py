# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
"""
FUSE mount support for bucketfs.

The adapter lives in ``bucketfs.fuse.fuse_mount``; it is not imported here
because loading fusepy requires libfuse on the host.
"""
