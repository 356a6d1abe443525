"""GAMEDAT PAC binary layer: layout, reader, writer and text obfuscation."""
