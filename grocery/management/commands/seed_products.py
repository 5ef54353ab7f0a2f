from decimal import Decimal

from django.core.management.base import BaseCommand

from grocery.models import Product

SAMPLE_PRODUCTS = [
    ('Fresh Apples', 'Crisp and juicy red apples, perfect for snacking or baking.', '2.99',
     'https://images.unsplash.com/photo-1619546813926-a78fa6372cd2', 'fruit', 100),
    ('Organic Bananas', 'Sweet and creamy organic bananas, rich in potassium.', '1.99',
     'https://images.unsplash.com/photo-1571771894821-ce9b6c11b08e', 'fruit', 150),
    ('Fresh Carrots', 'Crunchy and sweet carrots, great for snacking or cooking.', '1.49',
     'https://images.unsplash.com/photo-1598170845058-32b9d6a5da37', 'vegetable', 200),
    ('Ripe Mangoes', 'Sweet and juicy mangoes at peak ripeness.', '3.99',
     'https://images.unsplash.com/photo-1553279768-865429fa0078', 'fruit', 75),
    ('Fresh Spinach', 'Tender and nutritious spinach leaves.', '2.49',
     'https://images.unsplash.com/photo-1576045057995-568f588f82fb', 'vegetable', 120),
    ('Sweet Oranges', 'Juicy and sweet oranges, packed with vitamin C.', '3.49',
     'https://images.unsplash.com/photo-1547514701-42782101795e', 'fruit', 90),
    ('Fresh Broccoli', 'Crisp and nutritious broccoli florets.', '2.99',
     'https://images.unsplash.com/photo-1584270354949-c26b0d5b4a0c', 'vegetable', 80),
    ('Red Grapes', 'Sweet and seedless red grapes.', '4.99',
     'https://images.unsplash.com/photo-1537640538966-79f369143f8f', 'fruit', 100),
    ('Bell Peppers', 'Colorful and crisp bell peppers.', '1.99',
     'https://images.unsplash.com/photo-1563565375-f3fdfdbefa83', 'vegetable', 110),
    ('Fresh Strawberries', 'Sweet and juicy strawberries.', '4.49',
     'https://images.unsplash.com/photo-1464965911861-746a04b4bca6', 'fruit', 85),
    ('Cherry Tomatoes', 'Sweet and bite-sized cherry tomatoes.', '3.29',
     'https://images.unsplash.com/photo-1546094096-0df4bcaaa337', 'vegetable', 95),
    ('Fresh Blueberries', 'Plump and sweet blueberries.', '5.99',
     'https://images.unsplash.com/photo-1498557850523-fd3d118b962e', 'fruit', 70),
    ('Green Beans', 'Crisp and tender green beans.', '2.79',
     'https://images.unsplash.com/photo-1567375698348-5d9d5ae99de0', 'vegetable', 130),
    ('Fresh Pineapple', 'Sweet and tropical fresh pineapple.', '4.99',
     'https://images.unsplash.com/photo-1550258987-190a2d41a8ba', 'fruit', 60),
    ('Avocados', 'Creamy and nutritious avocados.', '2.99',
     'https://images.unsplash.com/photo-1523049673857-eb18f1d7b578', 'fruit', 80),
    ('Sweet Potatoes', 'Nutritious and versatile sweet potatoes.', '1.99',
     'https://images.unsplash.com/photo-1596097557993-54e1dbe3149f', 'vegetable', 120),
    ('Cucumber', 'Cool and crisp cucumbers.', '1.79',
     'https://images.unsplash.com/photo-1604977042946-1eecc30f269e', 'vegetable', 140),
    ('Kiwi', 'Tangy and sweet kiwi fruits.', '3.49',
     'https://images.unsplash.com/photo-1585059895524-72359e06133a', 'fruit', 90),
    ('Asparagus', 'Fresh and tender asparagus spears.', '4.99',
     'https://images.unsplash.com/photo-1515471209610-dae1c92d8777', 'vegetable', 75),
    ('Dragon Fruit', 'Exotic and beautiful dragon fruit.', '6.99',
     'https://images.unsplash.com/photo-1527325678964-54921661f888', 'fruit', 50),
    ('Brussels Sprouts', 'Fresh and nutritious Brussels sprouts.', '3.49',
     'https://images.unsplash.com/photo-1438118907704-7718ee9a191a', 'vegetable', 100),
    ('Pomegranate', 'Sweet and juicy pomegranate.', '4.99',
     'https://images.unsplash.com/photo-1541344999736-83eca272f6fc', 'fruit', 70),
    ('Cauliflower', 'Fresh and versatile cauliflower.', '2.99',
     'https://images.unsplash.com/photo-1568584711075-3d021a7c3ca3', 'vegetable', 85),
    ('Passion Fruit', 'Exotic and aromatic passion fruit.', '5.99',
     'https://images.unsplash.com/photo-1604495772376-9657f0035eb5', 'fruit', 60),
    ('Artichokes', 'Fresh and flavorful artichokes.', '3.99',
     'https://images.unsplash.com/photo-1612258264055-11ab003d9459', 'vegetable', 70),
    ('Lychee', 'Sweet and fragrant lychee fruits.', '7.99',
     'https://images.unsplash.com/photo-1629721671030-a83edbb11211', 'fruit', 45),
    ('Eggplant', 'Fresh and glossy eggplants.', '2.49',
     'https://images.unsplash.com/photo-1605196560547-b2f7281b7e68', 'vegetable', 95),
    ('Fresh Figs', 'Sweet and delicate fresh figs.', '6.99',
     'https://images.unsplash.com/photo-1601379760883-1bb497c558f0', 'fruit', 55),
]


class Command(BaseCommand):
    help = 'Load a sample fruit and vegetable catalog'

    def add_arguments(self, parser):
        parser.add_argument('--reset', action='store_true', help='Delete existing products first')

    def handle(self, *args, **options):
        if options['reset']:
            deleted = Product.objects.delete()
            self.stdout.write(f'Cleared {deleted} existing products')
        created = 0
        for name, description, price, image, category, stock in SAMPLE_PRODUCTS:
            if Product.objects(name=name).first():
                continue
            Product(
                name=name,
                description=description,
                price=Decimal(price),
                image=image,
                category=category,
                stock=stock,
            ).save()
            created += 1
        self.stdout.write(self.style.SUCCESS(
            f'Created {created} products ({Product.objects.count()} in catalog)'))
