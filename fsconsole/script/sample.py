# fsconsole/script/sample.py

SAMPLE_SCRIPT = """\
# Sample script for the EXT2 filesystem simulator
# Creates a disk, partitions it, formats it and adds a user.

# 3000 MB disk
mkdisk -size=3000 -unit=M -path="/home/disk1.mia"

# Primary partition of 300 MB
fdisk -size=300 -unit=M -path="/home/disk1.mia" -name="Partition1"

# Extended partition of 500 MB
fdisk -size=500 -unit=M -path="/home/disk1.mia" -name="Extended1" -type=E

# Logical partition of 100 MB
fdisk -size=100 -unit=M -path="/home/disk1.mia" -name="Logical1" -type=L

# Mount and format the first partition
mount -path="/home/disk1.mia" -name="Partition1"
mkfs -id="A1" -type=full

# Log in as root
login -user="root" -pass="123" -id="A1"

mkgrp -name="users"
mkusr -user="juan" -pass="123" -grp="users"

mkdir -path="/home/documents" -p
mkfile -path="/home/documents/file.txt" -size=100

# Reports
rep -id="A1" -path="/home/mbr_report.jpg" -name=mbr
rep -id="A1" -path="/home/disk_report.jpg" -name=disk
rep -id="A1" -path="/home/tree_report.jpg" -name=tree

logout
"""
