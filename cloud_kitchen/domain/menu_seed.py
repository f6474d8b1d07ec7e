# Launch menu, loaded into an empty catalog on first start.
# Products with size variants carry a base price of "0"; the size price applies.

_IMG = "https://images.unsplash.com/{}?q=80&w=2400&auto=format&fit=crop"

SEED_MENU = [
    # === SIGNATURE COMBOS ===
    {
        "name": "Infusionist Feast Combo",
        "description": "Our signature, built to be shared. One full infused chicken (choice of flavour), "
                       "Mandi rice, four rumali roti, crispy fries, garden salad and three global dips.",
        "price": "699",
        "category": "Signature Combos",
        "image_url": _IMG.format("photo-1604908176997-125f25cc6f3d"),
        "badges": ["Bestseller"],
    },
    # === INFUSED CHICKENS ===
    {
        "name": "Peri Peri Classic",
        "description": "Citrus heat with a slow char finish, infused for 24 hours with peri peri spices.",
        "price": "449",
        "category": "Infused Chickens",
        "image_url": _IMG.format("photo-1598103442097-8b74394b95c6"),
        "badges": ["Spicy"],
    },
    {
        "name": "Creamy Cheese Infused",
        "description": "Mild, rich and comforting. Slow-infused with a creamy cheese blend.",
        "price": "449",
        "category": "Infused Chickens",
        "image_url": _IMG.format("photo-1532550907401-a500c9a57435"),
        "badges": ["Mild"],
    },
    {
        "name": "Honey Chilli Glaze",
        "description": "Sweet heat and balanced caramelisation: honey up front, chilli behind.",
        "price": "449",
        "category": "Infused Chickens",
        "image_url": _IMG.format("photo-1527477396000-64bc618e7d38"),
        "badges": ["Popular"],
    },
    # === SIDES & BREADS ===
    {
        "name": "Mandi Rice",
        "description": "Aromatic, lightly spiced basmati cooked in the traditional Mandi style.",
        "price": "120",
        "category": "Sides & Breads",
        "image_url": _IMG.format("photo-1596797038530-2c107229654b"),
    },
    {
        "name": "Butter Garlic Rice",
        "description": "Basmati sauteed with butter and roasted garlic.",
        "price": "129",
        "category": "Sides & Breads",
        "image_url": _IMG.format("photo-1516714435131-44d6b64dc6a2"),
    },
    {
        "name": "Rumali Roti",
        "description": "Soft, thin handkerchief bread for wrapping around infused meats.",
        "price": "0",
        "category": "Sides & Breads",
        "image_url": _IMG.format("photo-1565557623262-b51c2513a641"),
        "sizes": [{"label": "2 pcs", "price": "40"}, {"label": "4 pcs", "price": "70"}],
    },
    {
        "name": "Fresh Garden Salad",
        "description": "Crisp greens, cherry tomatoes and cucumber with house vinaigrette.",
        "price": "49",
        "category": "Sides & Breads",
        "image_url": _IMG.format("photo-1512621776951-a57141f2eefd"),
    },
    # === GLOBAL SAUCES ===
    {
        "name": "Peri Peri Drizzle",
        "description": "Portuguese-African sauce with citrus heat and smoky undertones.",
        "price": "39",
        "category": "Global Sauces",
        "image_url": _IMG.format("photo-1472476443507-c7a5948772fc"),
        "badges": ["🇵🇹"],
    },
    {
        "name": "Creamy Mushroom Garlic",
        "description": "Italian-style cream sauce with sauteed mushrooms and roasted garlic.",
        "price": "39",
        "category": "Global Sauces",
        "image_url": _IMG.format("photo-1622973536968-3ead9e780960"),
        "badges": ["🇮🇹"],
    },
    {
        "name": "Herb Butter Jus",
        "description": "French-inspired herb butter sauce. Silky and aromatic.",
        "price": "39",
        "category": "Global Sauces",
        "image_url": _IMG.format("photo-1607098665874-fd193397547b"),
        "badges": ["🇫🇷"],
    },
    {
        "name": "Korean Chilli Glaze",
        "description": "Sweet and spicy gochujang glaze with sesame and ginger.",
        "price": "39",
        "category": "Global Sauces",
        "image_url": _IMG.format("photo-1534422298391-e4f8c172789a"),
        "badges": ["🇰🇷"],
    },
    {
        "name": "Sesame Soy Reduction",
        "description": "Umami-rich reduction with toasted sesame and premium soy.",
        "price": "39",
        "category": "Global Sauces",
        "image_url": _IMG.format("photo-1585937421612-70a008356fbe"),
        "badges": ["🇯🇵"],
    },
    # === BEVERAGES ===
    {
        "name": "Craft Cola",
        "description": "Artisanal cola with natural spices, caramel and a hint of citrus.",
        "price": "60",
        "category": "Beverages",
        "image_url": _IMG.format("photo-1622483767028-3f66f32aef97"),
    },
    {
        "name": "Fresh Lime Soda",
        "description": "Refreshing lime soda, the perfect palate cleanser.",
        "price": "0",
        "category": "Beverages",
        "image_url": _IMG.format("photo-1513558161293-cdaf765ed2fd"),
        "sizes": [{"label": "Sweet", "price": "49"}, {"label": "Salted", "price": "49"}],
    },
]
