# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved
'''
This example demonstrates how to use the bucketfs FUSE mount to read and write files in an S3 bucket.

It provides a short script exercising a mounted bucket through plain file I/O.

Setup:
    # Install the package
    pip install bucketfs

    # Install FUSE on your system
    # On Ubuntu/Debian:
    sudo apt-get install fuse

    # On CentOS/RHEL:
    sudo yum install fuse

    # On macOS (using Homebrew):
    brew install macfuse

    # Configure AWS credentials as for any boto3 program
    # (environment, ~/.aws/credentials or an instance role)

    # Create a mount point
    mkdir -p /mnt/my-bucket

Usage:
    # Mount a bucket
    python -m bucketfs.fuse <bucket> <mountpoint>

    # Example, keeping all keys under "team-a/"
    BUCKETFS_PREFIX=team-a python -m bucketfs.fuse my-bucket /mnt/my-bucket

    # Run this example against the mount
    python fuse_operations.py my-bucket /mnt/my-bucket

    # Unmount when done
    # On Linux
    fusermount -u /mnt/my-bucket

    # On macOS
    umount /mnt/my-bucket

Troubleshooting:
    # Enable debug logging and per-operation traces
    python -m bucketfs.fuse --trace <bucket> <mountpoint>

    # Files can only be written front to back; opening for append or
    # read-write fails with "Operation not supported"

    # Check if FUSE is properly installed
    which fusermount  # Linux
    which mount_macfuse  # macOS

'''
import sys
import os

def main():
    if len(sys.argv) != 3:
        print("Usage: python fuse_operations.py <bucket> <mountpoint>")
        sys.exit(1)

    bucket = sys.argv[1]
    mountpoint = sys.argv[2]
    directory = os.path.join(mountpoint, "example")
    example_file = os.path.join(directory, "example.txt")
    print(f"Using bucket {bucket} mounted at {mountpoint}")

    # Directories are zero-byte markers ending in "/"
    try:
        os.makedirs(directory, exist_ok=True)
        print(f"Directory created: {directory}")
    except OSError as e:
        print(f"Mkdir failed: {e}")

    # Sequential writes are streamed to the bucket, the object appears on close
    try:
        with open(example_file, 'wb') as f:
            for i in range(3):
                f.write(f"line {i}\n".encode())
        print(f"File created and written: {example_file}")
    except OSError as e:
        print(f"Write operation failed: {e}")

    # Reads at an offset become ranged GETs
    try:
        with open(example_file, 'rb') as f:
            f.seek(7)
            print(f"Read from offset 7: {f.read(6)!r}")
    except OSError as e:
        print(f"Read operation failed: {e}")

    # Appending is not something the bucket can do
    try:
        with open(example_file, 'a') as f:
            f.write("more")
    except OSError as e:
        print(f"Append refused as expected: {e}")

    print(f"Directory listing: {os.listdir(directory)}")

    # Rename is a copy followed by a delete
    renamed = os.path.join(directory, "renamed.txt")
    try:
        os.rename(example_file, renamed)
        os.remove(renamed)
        os.rmdir(directory)
        print(f"Renamed, removed and cleaned up {directory}")
    except OSError as e:
        print(f"Cleanup failed: {e}")

if __name__ == '__main__':
    main()
