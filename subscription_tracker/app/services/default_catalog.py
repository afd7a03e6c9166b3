"""Built-in marketplace catalog used by ``seed-catalog`` when no file is given."""

DEFAULT_CATALOG = [
    {
        "id": "netflix",
        "name": "Netflix",
        "category": "Streaming",
        "logoUrl": "https://logo.clearbit.com/netflix.com",
        "description": "Movies, TV shows and documentaries on demand.",
        "basePrice": "6.99",
        "isPopular": True,
        "features": ["Unlimited streaming", "Downloads", "Multiple profiles"],
        "launchUrl": "https://www.netflix.com",
        "plans": [
            {"id": "netflix-basic-ads", "name": "Standard with ads", "price": 6.99,
             "billingCycle": "monthly", "features": ["1080p", "2 screens", "Ads"]},
            {"id": "netflix-standard", "name": "Standard", "price": 15.49,
             "billingCycle": "monthly", "features": ["1080p", "2 screens", "Downloads"]},
            {"id": "netflix-premium", "name": "Premium", "price": 22.99,
             "billingCycle": "monthly", "features": ["4K + HDR", "4 screens", "Spatial audio"]},
        ],
    },
    {
        "id": "disney-plus",
        "name": "Disney+",
        "category": "Streaming",
        "logoUrl": "https://logo.clearbit.com/disneyplus.com",
        "description": "Disney, Pixar, Marvel, Star Wars and National Geographic.",
        "basePrice": "7.99",
        "isPopular": True,
        "features": ["4K UHD", "Downloads", "Up to 4 streams"],
        "launchUrl": "https://www.disneyplus.com",
        "plans": [
            {"id": "disney-basic", "name": "Basic", "price": 7.99,
             "billingCycle": "monthly", "features": ["With ads"]},
            {"id": "disney-premium", "name": "Premium", "price": 13.99,
             "billingCycle": "monthly", "features": ["No ads", "Downloads"]},
            {"id": "disney-premium-annual", "name": "Premium Annual", "price": 139.99,
             "billingCycle": "annual", "features": ["No ads", "Downloads", "Two months free"]},
        ],
    },
    {
        "id": "spotify",
        "name": "Spotify",
        "category": "Music",
        "logoUrl": "https://logo.clearbit.com/spotify.com",
        "description": "Music and podcasts without ads.",
        "basePrice": "11.99",
        "isPopular": True,
        "features": ["Ad-free listening", "Offline playback"],
        "launchUrl": "https://open.spotify.com",
        "plans": [
            {"id": "spotify-individual", "name": "Individual", "price": 11.99,
             "billingCycle": "monthly", "features": ["1 account"]},
            {"id": "spotify-duo", "name": "Duo", "price": 16.99,
             "billingCycle": "monthly", "features": ["2 accounts"]},
            {"id": "spotify-family", "name": "Family", "price": 19.99,
             "billingCycle": "monthly", "features": ["Up to 6 accounts"]},
        ],
    },
    {
        "id": "youtube-premium",
        "name": "YouTube Premium",
        "category": "Streaming",
        "logoUrl": "https://logo.clearbit.com/youtube.com",
        "description": "Ad-free YouTube with background play and YouTube Music.",
        "basePrice": "13.99",
        "isPopular": False,
        "features": ["Ad-free", "Background play", "Downloads"],
        "launchUrl": "https://www.youtube.com",
        "plans": [
            {"id": "youtube-individual", "name": "Individual", "price": 13.99,
             "billingCycle": "monthly", "features": ["1 account"]},
            {"id": "youtube-annual", "name": "Individual Annual", "price": 139.99,
             "billingCycle": "annual", "features": ["1 account", "Annual billing"]},
        ],
    },
    {
        "id": "hulu",
        "name": "Hulu",
        "category": "Streaming",
        "logoUrl": "https://logo.clearbit.com/hulu.com",
        "description": "Current TV episodes, originals and films.",
        "basePrice": "9.99",
        "isPopular": False,
        "features": ["Next-day TV", "Hulu Originals"],
        "launchUrl": "https://www.hulu.com",
        "plans": [
            {"id": "hulu-ads", "name": "With Ads", "price": 9.99,
             "billingCycle": "monthly", "features": ["Ads"]},
            {"id": "hulu-no-ads", "name": "No Ads", "price": 18.99,
             "billingCycle": "monthly", "features": ["No ads", "Downloads"]},
        ],
    },
    {
        "id": "apple-tv-plus",
        "name": "Apple TV+",
        "category": "Streaming",
        "logoUrl": "https://logo.clearbit.com/apple.com",
        "description": "Apple Originals shows and films.",
        "basePrice": "9.99",
        "isPopular": False,
        "features": ["4K HDR", "Family sharing"],
        "launchUrl": "https://tv.apple.com",
        "plans": [
            {"id": "apple-tv-monthly", "name": "Monthly", "price": 9.99,
             "billingCycle": "monthly", "features": ["Up to 6 family members"]},
        ],
    },
]
