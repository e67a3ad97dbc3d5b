"""Creates the empty products table and the image folder."""
import os
import pandas as pd

from app.config import settings

PRODUCT_COLUMNS = [
    'id', 'name', 'description', 'price', 'category_id', 'seller_id',
    'stock', 'is_available', 'labels', 'images', 'created_at',
]

os.makedirs(settings.image_dir, exist_ok=True)
os.makedirs(settings.DATA_DIR, exist_ok=True)

path = settings.DATA_DIR / settings.PRODUCTS_FILE
if not path.exists():
    df = pd.DataFrame(columns=PRODUCT_COLUMNS)
    if path.suffix.lower() == '.xlsx':
        df.to_excel(path, index=False)
    else:
        df.to_csv(path, index=False)
    print(f'Created {path}')
else:
    print(f'{path} already exists')
