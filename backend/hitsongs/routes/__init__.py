"""
Hit Songs API — API Routes Package
===================================

Route Inventory (all GET):
    - artists.py:    /api/artists, /api/artists/{ref}, /api/artists/averages/{ref}
    - genres.py:     /api/genres
    - songs.py:      /api/songs, /api/songs/sort/{order}, /api/songs/{ref},
                     /api/songs/search/{begin,any,year}/{substring},
                     /api/songs/artist/{ref}, /api/songs/genre/{ref}
    - playlists.py:  /api/playlists/{ref}
    - mood.py:       /api/mood/{dancing,happy,coffee,studying}[/{ref}]
    - health.py:     /health

Design Principle:
    Routes are THIN: build the query with `services.catalog`, dispatch it,
    hand the outcome to `responses.build_response`. No route builds its own
    error response.
"""
