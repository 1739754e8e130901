"""NixOS update status tools."""
