"""Sync images from a SharePoint/OneDrive shared folder into a local gallery."""
