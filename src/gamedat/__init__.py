"""gamedat: read and write Pajamas Adventure System GAMEDAT PAC archives."""

__version__ = "0.1.0"
