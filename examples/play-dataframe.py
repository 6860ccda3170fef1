import logging

from colframe.compute import SumAggregation
from colframe.io import read_csv, write_json

logging.basicConfig(level=logging.DEBUG)

shops = read_csv("data/shops.csv")
sales = read_csv("data/sales.csv")

revenue = sales["Quantity"].fill_null(0) * sales["Price"]
revenue.rename("Revenue")
sales.add_column(revenue)

sales = sales.left_join(shops, on="Shop Name")
rome_sales = sales.filter(sales["City"] == "Rome")

by_product = (
    rome_sales.groupby("Product")
    .agg({"Revenue": SumAggregation("Revenue")})
    .sort("Revenue", descending=True)
)
print(by_product)

write_json(by_product, "data/rome_revenue.json")
