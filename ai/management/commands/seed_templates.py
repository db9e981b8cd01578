"""
Management command to seed the built-in section templates.
Usage: python manage.py seed_templates
"""
from django.core.management.base import BaseCommand
from ai.models import Template

TEMPLATES = [
    {
        'name': 'hero',
        'display_name': 'Hero Banner',
        'category': 'headers',
        'component_name': 'HeroBanner',
        'schema': {
            'type': 'object',
            'required': ['headline', 'subheadline', 'ctaText', 'backgroundImagePrompt'],
            'properties': {
                'headline': {'type': 'string'},
                'subheadline': {'type': 'string'},
                'ctaText': {'type': 'string'},
                'ctaLink': {'type': 'string'},
                'backgroundImagePrompt': {'type': 'string'},
                'overlayOpacity': {'type': 'number', 'minimum': 0, 'maximum': 1},
            },
        },
        'default_data': {'overlayOpacity': 0.4},
        'system_prompt': (
            "You are an expert travel content creator specializing in compelling hero sections "
            "for tourism websites. Write engaging, SEO-friendly copy that immediately captures "
            "visitor attention and conveys the unique appeal of the destination."
        ),
        'user_prompt_template': (
            "Generate hero banner content for a tourism website about {locationContext}. "
            "Write a headline of at most 60 characters, a descriptive subheadline and a CTA "
            "label of at most 20 characters. Also provide a detailed image generation prompt "
            "for the background."
        ),
    },
    {
        'name': 'attractions-grid',
        'display_name': 'Attractions Grid',
        'category': 'content',
        'component_name': 'AttractionsGrid',
        'schema': {
            'type': 'object',
            'required': ['sectionTitle', 'sectionDescription', 'attractions'],
            'properties': {
                'sectionTitle': {'type': 'string'},
                'sectionDescription': {'type': 'string'},
                'attractions': {
                    'type': 'array',
                    'minItems': 6,
                    'maxItems': 12,
                    'items': {
                        'type': 'object',
                        'required': ['name', 'description', 'imagePrompt', 'category', 'highlights'],
                        'properties': {
                            'name': {'type': 'string'},
                            'description': {'type': 'string'},
                            'imagePrompt': {'type': 'string'},
                            'category': {'type': 'string'},
                            'highlights': {'type': 'array', 'items': {'type': 'string'}},
                            'rating': {'type': 'number', 'minimum': 0, 'maximum': 5},
                            'price': {'type': 'string'},
                            'visitDuration': {'type': 'string'},
                            'bestTimeToVisit': {'type': 'string'},
                        },
                    },
                },
            },
        },
        'default_data': {},
        'system_prompt': (
            "You are a tourism expert creating attraction listings. Focus on diverse, must-see "
            "attractions that show the destination's character, with practical information."
        ),
        'user_prompt_template': (
            "Generate a grid of top attractions for {locationContext}. Include 8-10 attractions "
            "covering historical sites, cultural venues, natural landmarks and modern attractions. "
            "Use \"free\" or $ symbols for price."
        ),
    },
    {
        'name': 'features',
        'display_name': 'Features Section',
        'category': 'content',
        'component_name': 'FeaturesSection',
        'schema': {
            'type': 'object',
            'required': ['sectionTitle', 'sectionDescription', 'features'],
            'properties': {
                'sectionTitle': {'type': 'string'},
                'sectionDescription': {'type': 'string'},
                'features': {
                    'type': 'array',
                    'minItems': 4,
                    'maxItems': 6,
                    'items': {
                        'type': 'object',
                        'required': ['title', 'description', 'icon'],
                        'properties': {
                            'title': {'type': 'string'},
                            'description': {'type': 'string'},
                            'icon': {
                                'type': 'string',
                                'enum': ['map', 'calendar', 'globe', 'users', 'star',
                                         'heart', 'camera', 'sun', 'moon', 'cloud'],
                            },
                        },
                    },
                },
            },
        },
        'default_data': {},
        'system_prompt': (
            "You are creating feature highlights for a tourism destination. Focus on unique "
            "selling points and practical benefits."
        ),
        'user_prompt_template': (
            "Generate 4-6 key features of visiting {locationContext}, such as cultural "
            "experiences, natural beauty, activities or cuisine."
        ),
    },
    {
        'name': 'testimonials',
        'display_name': 'Testimonials Carousel',
        'category': 'social-proof',
        'component_name': 'TestimonialsCarousel',
        'schema': {
            'type': 'object',
            'required': ['sectionTitle', 'sectionDescription', 'testimonials'],
            'properties': {
                'sectionTitle': {'type': 'string'},
                'sectionDescription': {'type': 'string'},
                'testimonials': {
                    'type': 'array',
                    'minItems': 6,
                    'maxItems': 10,
                    'items': {
                        'type': 'object',
                        'required': ['content', 'author', 'origin', 'rating'],
                        'properties': {
                            'content': {'type': 'string'},
                            'author': {'type': 'string'},
                            'origin': {'type': 'string'},
                            'rating': {'type': 'number', 'minimum': 4, 'maximum': 5},
                            'visitDate': {'type': 'string'},
                        },
                    },
                },
            },
        },
        'default_data': {},
        'system_prompt': (
            "Create authentic-sounding testimonials from diverse international visitors. "
            "Vary the writing styles and perspectives."
        ),
        'user_prompt_template': (
            "Generate 8 realistic testimonials from visitors to {locationContext}, from "
            "families, couples, solo travelers and business visitors."
        ),
    },
    {
        'name': 'cta',
        'display_name': 'Call to Action',
        'category': 'conversion',
        'component_name': 'CTASection',
        'schema': {
            'type': 'object',
            'required': ['headline', 'description', 'primaryButtonText', 'secondaryButtonText',
                         'backgroundImagePrompt'],
            'properties': {
                'headline': {'type': 'string'},
                'description': {'type': 'string'},
                'primaryButtonText': {'type': 'string'},
                'primaryButtonLink': {'type': 'string'},
                'secondaryButtonText': {'type': 'string'},
                'secondaryButtonLink': {'type': 'string'},
                'backgroundImagePrompt': {'type': 'string'},
            },
        },
        'default_data': {'primaryButtonLink': '/contact', 'secondaryButtonLink': '/guides'},
        'system_prompt': (
            "Create call-to-action content that motivates visitors to take the next step in "
            "planning their trip. Be persuasive but not pushy."
        ),
        'user_prompt_template': (
            "Generate a call-to-action section for {locationContext} with primary and "
            "secondary buttons."
        ),
    },
    {
        'name': 'map-interactive',
        'display_name': 'Interactive Map',
        'category': 'information',
        'component_name': 'InteractiveMap',
        'schema': {
            'type': 'object',
            'required': ['sectionTitle', 'center', 'markers'],
            'properties': {
                'sectionTitle': {'type': 'string'},
                'center': {
                    'type': 'object',
                    'required': ['lat', 'lng'],
                    'properties': {
                        'lat': {'type': 'number', 'minimum': -90, 'maximum': 90},
                        'lng': {'type': 'number', 'minimum': -180, 'maximum': 180},
                    },
                },
                'zoom': {'type': 'integer', 'minimum': 1, 'maximum': 20},
                'markers': {
                    'type': 'array',
                    'minItems': 3,
                    'maxItems': 20,
                    'items': {
                        'type': 'object',
                        'required': ['name', 'lat', 'lng', 'category'],
                        'properties': {
                            'name': {'type': 'string'},
                            'description': {'type': 'string'},
                            'lat': {'type': 'number'},
                            'lng': {'type': 'number'},
                            'category': {
                                'type': 'string',
                                'enum': ['attraction', 'restaurant', 'hotel', 'shopping', 'transport',
                                         'park', 'museum', 'beach', 'nightlife'],
                            },
                        },
                    },
                },
            },
        },
        'default_data': {'zoom': 13},
        'system_prompt': (
            "You are a local guide placing points of interest on a map. Use real places and "
            "accurate coordinates."
        ),
        'user_prompt_template': (
            "Generate an interactive map for {locationContext}: the center coordinates and "
            "10-15 markers for attractions, restaurants, hotels, parks and transport hubs."
        ),
    },
    {
        'name': 'weather-widget',
        'display_name': 'Weather & Climate',
        'category': 'information',
        'component_name': 'WeatherWidget',
        'schema': {
            'type': 'object',
            'required': ['sectionTitle', 'climateData'],
            'properties': {
                'sectionTitle': {'type': 'string'},
                'climateData': {
                    'type': 'object',
                    'required': ['monthly', 'bestTimeToVisit'],
                    'properties': {
                        'bestTimeToVisit': {'type': 'string'},
                        'monthly': {
                            'type': 'array',
                            'minItems': 12,
                            'maxItems': 12,
                            'items': {
                                'type': 'object',
                                'required': ['month', 'highTemp', 'lowTemp'],
                                'properties': {
                                    'month': {'type': 'string'},
                                    'highTemp': {'type': 'number'},
                                    'lowTemp': {'type': 'number'},
                                    'rainfall': {'type': 'number', 'minimum': 0},
                                },
                            },
                        },
                    },
                },
            },
        },
        'default_data': {},
        'system_prompt': (
            "You are a travel climate expert. Provide realistic average temperatures in "
            "Celsius and rainfall in millimetres."
        ),
        'user_prompt_template': (
            "Generate climate information for {locationContext}: average high and low "
            "temperature and rainfall for each of the 12 months, and the best time to visit."
        ),
    },

    # Attraction pages and shared media/information sections.
    {
        'name': 'overview',
        'display_name': 'Overview Section',
        'category': 'content',
        'component_name': 'OverviewSection',
        'schema': {
            'type': 'object',
            'required': ['title', 'introduction', 'keyFacts', 'imagePrompts'],
            'properties': {
                'title': {'type': 'string'},
                'introduction': {'type': 'string'},
                'keyFacts': {
                    'type': 'array',
                    'minItems': 4,
                    'maxItems': 8,
                    'items': {
                        'type': 'object',
                        'required': ['label', 'value'],
                        'properties': {
                            'label': {'type': 'string'},
                            'value': {'type': 'string'},
                        },
                    },
                },
                'imagePrompts': {
                    'type': 'array',
                    'minItems': 2,
                    'maxItems': 3,
                    'items': {'type': 'string'},
                },
            },
        },
        'default_data': {},
        'system_prompt': (
            "You are writing the overview of a single attraction. Be complete but concise so "
            "visitors know exactly what to expect."
        ),
        'user_prompt_template': (
            "Generate an overview section for {locationContext}: an introduction, key facts "
            "(opening hours, ticket prices, historical dates, visitor numbers) and image "
            "prompts for 2-3 supporting images."
        ),
    },
    {
        'name': 'gallery',
        'display_name': 'Photo Gallery',
        'category': 'media',
        'component_name': 'PhotoGallery',
        'schema': {
            'type': 'object',
            'required': ['sectionTitle', 'sectionDescription', 'images'],
            'properties': {
                'sectionTitle': {'type': 'string'},
                'sectionDescription': {'type': 'string'},
                'images': {
                    'type': 'array',
                    'minItems': 8,
                    'maxItems': 12,
                    'items': {
                        'type': 'object',
                        'required': ['caption', 'imagePrompt', 'category'],
                        'properties': {
                            'caption': {'type': 'string'},
                            'imagePrompt': {'type': 'string'},
                            'category': {'type': 'string'},
                        },
                    },
                },
            },
        },
        'default_data': {},
        'system_prompt': (
            "Create a varied photo gallery of the destination: different perspectives, times "
            "of day and seasons where relevant."
        ),
        'user_prompt_template': (
            "Generate a photo gallery for {locationContext} with 10 images covering "
            "architecture, landscapes, culture, food, people and activities. Give each a "
            "detailed image generation prompt and an informative caption."
        ),
    },
    {
        'name': 'info',
        'display_name': 'Practical Information',
        'category': 'information',
        'component_name': 'InfoSection',
        'schema': {
            'type': 'object',
            'required': ['sectionTitle', 'categories'],
            'properties': {
                'sectionTitle': {'type': 'string'},
                'categories': {
                    'type': 'array',
                    'items': {
                        'type': 'object',
                        'required': ['title', 'items'],
                        'properties': {
                            'title': {'type': 'string'},
                            'icon': {'type': 'string'},
                            'items': {
                                'type': 'array',
                                'items': {
                                    'type': 'object',
                                    'required': ['label', 'value'],
                                    'properties': {
                                        'label': {'type': 'string'},
                                        'value': {'type': 'string'},
                                    },
                                },
                            },
                        },
                    },
                },
            },
        },
        'default_data': {},
        'system_prompt': (
            "Provide practical visitor information. Be specific and accurate, and cover "
            "everything needed to plan a visit."
        ),
        'user_prompt_template': (
            "Generate practical information for {locationContext} grouped into categories such "
            "as Getting There, Opening Hours, Tickets & Pricing, Best Time to Visit, What to "
            "Bring and Accessibility."
        ),
    },
    {
        'name': 'highlights',
        'display_name': 'Key Highlights',
        'category': 'content',
        'component_name': 'HighlightsSection',
        'schema': {
            'type': 'object',
            'required': ['sectionTitle', 'sectionDescription', 'highlights'],
            'properties': {
                'sectionTitle': {'type': 'string'},
                'sectionDescription': {'type': 'string'},
                'highlights': {
                    'type': 'array',
                    'minItems': 4,
                    'maxItems': 6,
                    'items': {
                        'type': 'object',
                        'required': ['title', 'description', 'imagePrompt', 'details'],
                        'properties': {
                            'title': {'type': 'string'},
                            'description': {'type': 'string'},
                            'imagePrompt': {'type': 'string'},
                            'details': {'type': 'array', 'items': {'type': 'string'}},
                        },
                    },
                },
            },
        },
        'default_data': {},
        'system_prompt': (
            "Describe the most important and interesting aspects of the attraction: unique "
            "features, historical significance and what visitors experience."
        ),
        'user_prompt_template': (
            "Generate 4-6 key highlights for {locationContext}, each about one aspect such as "
            "architecture, history, art collections or views, with specific details."
        ),
    },
    {
        'name': 'attraction-hero',
        'display_name': 'Attraction Hero',
        'category': 'headers',
        'component_name': 'AttractionHero',
        'schema': {
            'type': 'object',
            'required': ['mainHeadline', 'subHeadline', 'price', 'currency', 'keyFeatures',
                         'backgroundImagePrompt', 'availableBadge', 'ctaButtons', 'disclaimer'],
            'properties': {
                'mainHeadline': {'type': 'string'},
                'subHeadline': {'type': 'string'},
                'price': {'type': 'string'},
                'currency': {'type': 'string'},
                'keyFeatures': {
                    'type': 'array',
                    'minItems': 3,
                    'maxItems': 5,
                    'items': {'type': 'string'},
                },
                'backgroundImagePrompt': {'type': 'string'},
                'availableBadge': {'type': 'string'},
                'ctaButtons': {
                    'type': 'object',
                    'properties': {
                        'primary': {
                            'type': 'object',
                            'properties': {'text': {'type': 'string'}, 'link': {'type': 'string'}},
                        },
                        'secondary': {
                            'type': 'object',
                            'properties': {'text': {'type': 'string'}, 'link': {'type': 'string'}},
                        },
                    },
                },
                'disclaimer': {'type': 'string'},
            },
        },
        'default_data': {
            'currency': '€',
            'availableBadge': 'Available Today',
            'ctaButtons': {
                'primary': {'text': 'See Tickets & Prices', 'link': '#featured-experiences'},
                'secondary': {'text': 'Buy Tickets', 'link': '#'},
            },
            'disclaimer': (
                'This is not an official website. All content is for informational purposes only. '
                'We may earn commission from bookings.'
            ),
        },
        'system_prompt': (
            "You write conversion-focused hero copy for tourist attraction landing pages: the "
            "main appeal, pricing and the features that make the attraction special."
        ),
        'user_prompt_template': (
            "Generate hero content for {locationContext}: a headline of 50-70 characters, a "
            "subheadline of 80-120 characters, the lowest ticket price as a number, 4 key "
            "features of 20-30 characters each and a dramatic background image prompt."
        ),
    },
    {
        'name': 'quick-info-bar',
        'display_name': 'Quick Info Bar',
        'category': 'information',
        'component_name': 'QuickInfoBar',
        'schema': {
            'type': 'object',
            'required': ['duration', 'languages', 'groupSize', 'features'],
            'properties': {
                'duration': {'type': 'string'},
                'languages': {'type': 'array', 'items': {'type': 'string'}},
                'groupSize': {'type': 'string'},
                'features': {'type': 'array', 'items': {'type': 'string'}},
            },
        },
        'default_data': {'features': ['Free Cancellation']},
        'system_prompt': "Write short, scannable facts about visiting the attraction.",
        'user_prompt_template': (
            "Generate quick info for {locationContext}: typical visit duration, tour languages, "
            "group size and key features such as free cancellation."
        ),
    },
    {
        'name': 'product-cards',
        'display_name': 'Product Cards',
        'category': 'content',
        'component_name': 'ProductCards',
        'schema': {
            'type': 'object',
            'required': ['sectionTitle', 'sectionDescription', 'badgeText', 'productCards'],
            'properties': {
                'sectionTitle': {'type': 'string'},
                'sectionDescription': {'type': 'string'},
                'badgeText': {'type': 'string'},
                'featuredWidget': {
                    'type': 'object',
                    'properties': {
                        'enabled': {'type': 'boolean'},
                        'title': {'type': 'string'},
                        'tourId': {'type': 'string'},
                    },
                },
                'productCards': {
                    'type': 'array',
                    'minItems': 2,
                    'maxItems': 4,
                    'items': {
                        'type': 'object',
                        'required': ['name', 'description', 'rating', 'reviewCount', 'price', 'currency',
                                     'duration', 'imagePrompts', 'features'],
                        'properties': {
                            'name': {'type': 'string'},
                            'description': {'type': 'string'},
                            'rating': {'type': 'number'},
                            'reviewCount': {'type': 'number'},
                            'price': {'type': 'string'},
                            'oldPrice': {'type': 'string'},
                            'currency': {'type': 'string'},
                            'priceType': {'type': 'string', 'enum': ['per_person', 'per_group', 'per_vehicle']},
                            'startsFrom': {'type': 'boolean'},
                            'duration': {'type': 'string'},
                            'imagePrompts': {'type': 'array', 'minItems': 3, 'items': {'type': 'string'}},
                            'badges': {'type': 'array', 'items': {'type': 'string'}},
                            'features': {
                                'type': 'object',
                                'properties': {
                                    'freeCancellation': {'type': 'boolean'},
                                    'instantConfirmation': {'type': 'boolean'},
                                    'hotelPickup': {'type': 'boolean'},
                                },
                            },
                            'highlights': {'type': 'array', 'items': {'type': 'string'}},
                            'directUrl': {'type': 'string'},
                            'affiliateUrl': {'type': 'string'},
                        },
                    },
                },
            },
        },
        'default_data': {
            'badgeText': 'Featured Experiences',
            'sectionTitle': 'Popular Tours & Activities',
            'sectionDescription': 'Handpicked experiences with excellent reviews',
        },
        'system_prompt': (
            "Create product cards for the tour and ticket options of an attraction, with varied "
            "price points and tour types."
        ),
        'user_prompt_template': (
            "Generate 3 ticket or tour options for {locationContext}: standard entry, a guided "
            "tour and a premium experience, each with its own price, duration and features."
        ),
    },
    {
        'name': 'tabbed-info',
        'display_name': 'Tabbed Information',
        'category': 'content',
        'component_name': 'TabbedInfo',
        'schema': {
            'type': 'object',
            'required': ['sectionTitle', 'sectionDescription', 'badgeText', 'tabs'],
            'properties': {
                'sectionTitle': {'type': 'string'},
                'sectionDescription': {'type': 'string'},
                'badgeText': {'type': 'string'},
                'tabs': {
                    'type': 'object',
                    'properties': {
                        'overview': {
                            'type': 'object',
                            'properties': {
                                'title': {'type': 'string'},
                                'content': {'type': 'string'},
                                'highlights': {
                                    'type': 'array',
                                    'items': {
                                        'type': 'object',
                                        'properties': {
                                            'value': {'type': 'string'},
                                            'label': {'type': 'string'},
                                        },
                                    },
                                },
                                'whyChooseUs': {
                                    'type': 'object',
                                    'properties': {
                                        'title': {'type': 'string'},
                                        'reasons': {
                                            'type': 'array',
                                            'items': {
                                                'type': 'object',
                                                'properties': {
                                                    'title': {'type': 'string'},
                                                    'description': {'type': 'string'},
                                                },
                                            },
                                        },
                                    },
                                },
                            },
                        },
                        'essentialInfo': {
                            'type': 'object',
                            'properties': {
                                'knowBeforeYouGo': {
                                    'type': 'object',
                                    'properties': {
                                        'categories': {
                                            'type': 'array',
                                            'items': {
                                                'type': 'object',
                                                'properties': {
                                                    'title': {'type': 'string'},
                                                    'items': {'type': 'array', 'items': {'type': 'string'}},
                                                },
                                            },
                                        },
                                    },
                                },
                                'notAllowed': {'type': 'array', 'items': {'type': 'string'}},
                                'additionalInfo': {'type': 'object'},
                            },
                        },
                        'planning': {'type': 'object'},
                        'moreInfo': {'type': 'object'},
                    },
                },
                'showcaseImagePrompts': {
                    'type': 'object',
                    'properties': {
                        'image1': {'type': 'string'},
                        'image2': {'type': 'string'},
                        'image3': {'type': 'string'},
                    },
                },
            },
        },
        'default_data': {
            'badgeText': 'Everything You Need to Know',
            'sectionTitle': 'Complete Experience Guide',
            'sectionDescription': 'All the details to plan your perfect visit',
        },
        'system_prompt': (
            "Organize everything about the attraction into four tabs: Overview, Essential Info, "
            "Planning and More Info."
        ),
        'user_prompt_template': (
            "Generate tabbed information for {locationContext}: an overview with highlights and "
            "reasons to visit, essential visitor information, planning tips and further facts."
        ),
    },
    {
        'name': 'reviews-carousel',
        'display_name': 'Reviews Carousel',
        'category': 'social-proof',
        'component_name': 'ReviewsCarousel',
        'schema': {
            'type': 'object',
            'required': ['sectionTitle', 'sectionDescription', 'badgeText', 'reviews'],
            'properties': {
                'sectionTitle': {'type': 'string'},
                'sectionDescription': {'type': 'string'},
                'badgeText': {'type': 'string'},
                'reviews': {
                    'type': 'array',
                    'minItems': 6,
                    'maxItems': 12,
                    'items': {
                        'type': 'object',
                        'required': ['author', 'country', 'date', 'rating', 'title', 'text'],
                        'properties': {
                            'author': {'type': 'string'},
                            'country': {'type': 'string'},
                            'date': {'type': 'string'},
                            'rating': {'type': 'number', 'minimum': 1, 'maximum': 5},
                            'title': {'type': 'string'},
                            'text': {'type': 'string'},
                        },
                    },
                },
            },
        },
        'default_data': {
            'badgeText': 'Customer Reviews',
            'sectionTitle': 'What Our Guests Say',
            'sectionDescription': 'Real experiences from travelers around the world',
        },
        'system_prompt': (
            "Write authentic-sounding reviews from visitors of many countries, with specific "
            "details and varied perspectives."
        ),
        'user_prompt_template': (
            "Generate 8-10 reviews of {locationContext} from visitors of different countries, "
            "mostly rated 4-5 stars, each describing a concrete experience."
        ),
    },
    {
        'name': 'faq-accordion',
        'display_name': 'FAQ Accordion',
        'category': 'information',
        'component_name': 'FAQAccordion',
        'schema': {
            'type': 'object',
            'required': ['sectionTitle', 'sectionDescription', 'badgeText', 'faqs'],
            'properties': {
                'sectionTitle': {'type': 'string'},
                'sectionDescription': {'type': 'string'},
                'badgeText': {'type': 'string'},
                'faqs': {
                    'type': 'array',
                    'minItems': 5,
                    'maxItems': 10,
                    'items': {
                        'type': 'object',
                        'required': ['question', 'answer'],
                        'properties': {
                            'question': {'type': 'string'},
                            'answer': {'type': 'string'},
                        },
                    },
                },
            },
        },
        'default_data': {
            'badgeText': 'FAQ',
            'sectionTitle': 'Frequently Asked Questions',
            'sectionDescription': 'Everything you need to know before your visit',
        },
        'system_prompt': "Answer the questions visitors most often ask about the attraction.",
        'user_prompt_template': (
            "Generate 6-8 frequently asked questions with detailed answers for {locationContext}, "
            "covering tickets, the best time to visit, accessibility and what to bring."
        ),
    },
    {
        'name': 'final-cta',
        'display_name': 'Final CTA',
        'category': 'cta',
        'component_name': 'FinalCTA',
        'schema': {
            'type': 'object',
            'required': ['headline', 'description', 'ctaButton', 'trustIndicators'],
            'properties': {
                'headline': {'type': 'string'},
                'description': {'type': 'string'},
                'ctaButton': {
                    'type': 'object',
                    'properties': {'text': {'type': 'string'}, 'link': {'type': 'string'}},
                },
                'backgroundImagePrompt': {'type': 'string'},
                'trustIndicators': {
                    'type': 'object',
                    'properties': {
                        'averageRating': {'type': 'string'},
                        'freeCancellation': {'type': 'string'},
                        'support': {'type': 'string'},
                    },
                },
            },
        },
        'default_data': {
            'ctaButton': {'text': 'Book Your Experience Now', 'link': '#'},
            'trustIndicators': {
                'averageRating': '4.9/5 Average Rating',
                'freeCancellation': 'Free Cancellation',
                'support': '24/7 Support',
            },
        },
        'system_prompt': "Write a closing call-to-action that gets visitors to book.",
        'user_prompt_template': (
            "Generate a final call-to-action for {locationContext}: an exciting headline, a "
            "motivating description and an optional atmospheric background image prompt."
        ),
    },
]


class Command(BaseCommand):
    help = 'Seed built-in section templates into the database'

    def handle(self, *args, **options):
        for entry in TEMPLATES:
            defaults = {key: value for key, value in entry.items() if key != 'name'}
            defaults['is_active'] = True
            _, created = Template.objects.update_or_create(name=entry['name'], defaults=defaults)
            action = 'Created' if created else 'Updated'
            self.stdout.write(f"{action}: {entry['name']}")

        self.stdout.write(self.style.SUCCESS(f'Seeded {len(TEMPLATES)} templates.'))
