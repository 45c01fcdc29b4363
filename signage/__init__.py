"""
Digital Signage Server.

Flask service that stores displays, content, playlists, assignments and
alerts, and resolves what each polling player should render.
"""
