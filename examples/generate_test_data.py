import csv
import os
import random

if not os.path.exists("data"):
    os.mkdir("data")

cities = ["Rome", "Milan", "Naples", "Turin", "Palermo", "Genoa", "Bologna", "Florence", "Bari", "Catania"]

if not os.path.exists("data/shops.csv"):
    shops = []
    for city in cities:
        for i in range(10):
            shops.append([f"Shop {i+1} in {city}", city])

    with open("data/shops.csv", "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(["Shop Name", "City"])
        writer.writerows(shops)

if not os.path.exists("data/sales.csv"):
    products = ["Dress", "Car", "Videogame", "Laptop", "TV"]
    sales = []
    for i in range(1000):
        shop = f"Shop {random.randint(1, 10)} in {random.choice(cities)}"
        product = random.choice(products)
        # Some sales have no recorded quantity.
        quantity = random.randint(1, 10) if random.random() > 0.05 else ""
        price = round(random.uniform(10, 100), 2)
        sales.append([shop, product, quantity, price])

    with open("data/sales.csv", "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(["Shop Name", "Product", "Quantity", "Price"])
        writer.writerows(sales)
