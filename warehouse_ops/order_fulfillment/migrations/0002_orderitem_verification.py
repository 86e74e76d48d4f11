from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ('order_fulfillment', '0001_initial'),
    ]

    operations = [
        migrations.AddField(
            model_name='orderitem',
            name='verified_quantity',
            field=models.PositiveIntegerField(default=0, help_text='Quantity checked by the packer'),
        ),
        migrations.AddField(
            model_name='orderitem',
            name='verification_skip_reason',
            field=models.CharField(blank=True, help_text='Why the packer set the line aside', max_length=500, null=True),
        ),
        migrations.AddConstraint(
            model_name='orderitem',
            constraint=models.CheckConstraint(
                condition=models.Q(('verified_quantity__lte', models.F('quantity'))),
                name='order_item_verified_lte_quantity',
            ),
        ),
    ]
